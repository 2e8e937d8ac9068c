from fastapi import APIRouter, Depends
from typing import List

from mesas.crud import turn as crud
from mesas.database import PoolManager, get_pool_manager
from mesas.schemas.turn import TurnResponse
from mesas.services.auth import Identity
from mesas.services.authorization import get_current_identity
from mesas.services.tenants import Building, get_building

router = APIRouter()


@router.get("/turns", response_model=List[TurnResponse])
def read_turns(
    building: Building = Depends(get_building),
    pools: PoolManager = Depends(get_pool_manager),
    current_user: Identity = Depends(get_current_identity),
):
    return pools.run(building, lambda db: crud.get_turns(db, building.name))
