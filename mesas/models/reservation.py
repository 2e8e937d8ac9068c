from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, UniqueConstraint
from datetime import datetime

from mesas.database import Base


class Reservation(Base):
    __tablename__ = "reservations"
    __table_args__ = (
        # Una mesa, un turno, un día: una sola reserva por edificio
        UniqueConstraint(
            "building", "table_id", "turn_id", "date", name="uq_reservations_slot"
        ),
        {"extend_existing": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    building = Column(String, nullable=False, index=True)
    table_id = Column(Integer, ForeignKey("tables.id"), nullable=False)
    turn_id = Column(Integer, ForeignKey("turns.id"), nullable=False)
    date = Column(Date, nullable=False)
    username = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
