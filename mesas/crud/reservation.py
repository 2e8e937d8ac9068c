import logging
from datetime import date
from typing import List

from sqlalchemy import and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from mesas.crud.table import get_table
from mesas.crud.turn import get_turn
from mesas.exceptions import SlotConflict, ValidationError
from mesas.models.reservation import Reservation
from mesas.models.turn import Turn
from mesas.models.user import User
from mesas.schemas.reservation import (
    ReservationCreate,
    ReservationListItem,
    ReservationResponse,
)

logger = logging.getLogger(__name__)


def get_reservations(db: Session, building: str) -> List[ReservationListItem]:
    rows = (
        db.query(Reservation, Turn.name, User.phone)
        .join(
            Turn,
            and_(Turn.id == Reservation.turn_id, Turn.building == Reservation.building),
        )
        .outerjoin(
            User,
            and_(
                User.username == Reservation.username,
                User.building == Reservation.building,
            ),
        )
        .filter(Reservation.building == building)
        .order_by(Reservation.date, Reservation.turn_id, Reservation.table_id)
        .all()
    )
    return [
        ReservationListItem(
            id=reservation.id,
            table_id=reservation.table_id,
            turn_id=reservation.turn_id,
            date=reservation.date,
            username=reservation.username,
            created_at=reservation.created_at,
            turn_name=turn_name,
            phone=phone,
        )
        for reservation, turn_name, phone in rows
    ]


def is_slot_taken(
    db: Session, building: str, table_id: int, turn_id: int, slot_date: date
) -> bool:
    return (
        db.query(Reservation.id)
        .filter(
            Reservation.building == building,
            Reservation.table_id == table_id,
            Reservation.turn_id == turn_id,
            Reservation.date == slot_date,
        )
        .first()
        is not None
    )


SLOT_CONSTRAINT = "uq_reservations_slot"
# SQLite no informa el nombre de la restricción, sólo sus columnas
SQLITE_SLOT_VIOLATION = (
    "UNIQUE constraint failed: reservations.building, reservations.table_id, "
    "reservations.turn_id, reservations.date"
)


def is_slot_violation(error: IntegrityError) -> bool:
    diag = getattr(error.orig, "diag", None)
    if getattr(diag, "constraint_name", None) == SLOT_CONSTRAINT:
        return True
    message = str(error.orig)
    return SLOT_CONSTRAINT in message or SQLITE_SLOT_VIOLATION in message


def create_reservation(
    db: Session, building: str, username: str, reservation: ReservationCreate
) -> ReservationResponse:
    """
    Valida mesa y turno, y crea la reserva en una sola transacción.

    La consulta de duplicados solo sirve para devolver un mensaje claro:
    ante dos pedidos simultáneos es la restricción única del slot la que
    rechaza al segundo (IntegrityError -> SlotConflict).
    """
    if get_table(db, building, reservation.table_id) is None:
        raise ValidationError(
            "Table does not exist in this building",
            details={"tableId": reservation.table_id},
        )
    if get_turn(db, building, reservation.turn_id) is None:
        raise ValidationError(
            "Turn does not exist in this building",
            details={"turnId": reservation.turn_id},
        )

    if is_slot_taken(
        db, building, reservation.table_id, reservation.turn_id, reservation.date
    ):
        raise SlotConflict()

    db_reservation = Reservation(
        building=building,
        table_id=reservation.table_id,
        turn_id=reservation.turn_id,
        date=reservation.date,
        username=username,
    )
    db.add(db_reservation)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if not is_slot_violation(e):
            raise
        logger.info(
            f"Slot conflict on insert | building={building} table={reservation.table_id} "
            f"turn={reservation.turn_id} date={reservation.date}"
        )
        raise SlotConflict() from e

    return ReservationResponse.model_validate(db_reservation)


def delete_reservation(db: Session, building: str, reservation_id: int) -> bool:
    # El edificio forma parte del predicado del DELETE
    deleted = (
        db.query(Reservation)
        .filter(Reservation.id == reservation_id, Reservation.building == building)
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted > 0
