from fastapi import APIRouter, Depends, status
from typing import List

from mesas.schemas.reservation import (
    ReservationCreate,
    ReservationListItem,
    ReservationResponse,
)
from mesas.services.auth import Identity
from mesas.services.authorization import get_current_admin, get_current_identity
from mesas.services.reservations import ReservationLedger, get_ledger
from mesas.services.tenants import Building, get_building

router = APIRouter()


@router.get("/reservations", response_model=List[ReservationListItem])
def read_reservations(
    building: Building = Depends(get_building),
    ledger: ReservationLedger = Depends(get_ledger),
    current_user: Identity = Depends(get_current_identity),
):
    return ledger.list(building)


@router.post(
    "/reservations",
    response_model=ReservationResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_reservation(
    reservation: ReservationCreate,
    building: Building = Depends(get_building),
    ledger: ReservationLedger = Depends(get_ledger),
    current_user: Identity = Depends(get_current_identity),
):
    # La reserva siempre queda a nombre de quien la pide
    return ledger.create(building, current_user.username, reservation)


@router.delete("/reservations/{reservation_id}")
def delete_reservation(
    reservation_id: int,
    building: Building = Depends(get_building),
    ledger: ReservationLedger = Depends(get_ledger),
    current_admin: Identity = Depends(get_current_admin),
):
    ledger.delete(building, reservation_id)
    return {"message": "Reserva cancelada con éxito"}
