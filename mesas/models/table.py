from sqlalchemy import Column, Integer, String

from mesas.database import Base


class Table(Base):
    __tablename__ = "tables"
    __table_args__ = {"extend_existing": True}

    id = Column(Integer, primary_key=True, index=True)
    building = Column(String, nullable=False, index=True)
    number = Column(Integer, nullable=False)
    capacity = Column(Integer, nullable=False, default=4)
