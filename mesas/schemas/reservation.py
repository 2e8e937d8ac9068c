from pydantic import BaseModel, Field
from datetime import date as date_type, datetime
from typing import Optional


class ReservationCreate(BaseModel):
    # Los clientes existentes envían tableId / turnId
    table_id: int = Field(..., gt=0, alias="tableId")
    turn_id: int = Field(..., gt=0, alias="turnId")
    date: date_type

    class Config:
        populate_by_name = True


class ReservationResponse(BaseModel):
    id: int
    table_id: int
    turn_id: int
    date: date_type
    username: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ReservationListItem(ReservationResponse):
    """Reserva con el nombre del turno y el teléfono de quien reservó."""

    turn_name: str
    phone: Optional[str] = None
