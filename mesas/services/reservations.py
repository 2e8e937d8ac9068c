import logging
from typing import List

from fastapi import Request

from mesas.crud import reservation as reservation_crud
from mesas.database import PoolManager
from mesas.exceptions import ReservationNotFound
from mesas.schemas.reservation import (
    ReservationCreate,
    ReservationListItem,
    ReservationResponse,
)
from mesas.services.cache import ReservationsCache
from mesas.services.tenants import Building

logger = logging.getLogger(__name__)


class ReservationLedger:
    """
    Listado, alta y baja de reservas de un edificio.

    Toda escritura invalida la entrada de cache del edificio antes de
    devolver el control al handler, de modo que el siguiente listado ya
    ve el cambio.
    """

    def __init__(self, pools: PoolManager, cache: ReservationsCache):
        self.pools = pools
        self.cache = cache

    def list(self, building: Building) -> List[ReservationListItem]:
        return self.cache.get_or_load(
            building.name,
            lambda: self.pools.run(
                building,
                lambda db: reservation_crud.get_reservations(db, building.name),
            ),
        )

    def create(
        self, building: Building, username: str, reservation: ReservationCreate
    ) -> ReservationResponse:
        # El reintento es seguro: si el primer INSERT llegó a confirmarse,
        # el segundo choca con la restricción única y termina en SlotConflict.
        try:
            created = self.pools.run(
                building,
                lambda db: reservation_crud.create_reservation(
                    db, building.name, username, reservation
                ),
            )
        finally:
            self.cache.invalidate(building.name)

        logger.info(
            f"Reservation {created.id} created | building={building.name} "
            f"table={created.table_id} turn={created.turn_id} date={created.date} "
            f"user={username}"
        )
        return created

    def delete(self, building: Building, reservation_id: int) -> None:
        # Sin reintento: si el DELETE ya se confirmó, repetirlo no encuentra la
        # fila y la baja exitosa terminaría en 404.
        try:
            deleted = self.pools.run(
                building,
                lambda db: reservation_crud.delete_reservation(
                    db, building.name, reservation_id
                ),
                retry=False,
            )
        finally:
            self.cache.invalidate(building.name)

        if not deleted:
            raise ReservationNotFound()
        logger.info(f"Reservation {reservation_id} deleted | building={building.name}")


def get_ledger(request: Request) -> ReservationLedger:
    return request.app.state.ledger
