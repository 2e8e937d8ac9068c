from sqlalchemy import Column, Integer, String

from mesas.database import Base


class Turn(Base):
    __tablename__ = "turns"
    __table_args__ = {"extend_existing": True}

    id = Column(Integer, primary_key=True, index=True)
    building = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)  # ej. "Almuerzo", "Cena"
