from fastapi import APIRouter, Depends
from typing import List

from mesas.database import PoolManager, get_pool_manager
from mesas.services.tenants import Building, TenantRegistry, get_building, get_registry

router = APIRouter()


@router.get("/api/buildings", response_model=List[str])
def read_buildings(registry: TenantRegistry = Depends(get_registry)):
    return registry.names()


@router.get("/{building}/api/test-db")
def test_db(
    building: Building = Depends(get_building),
    pools: PoolManager = Depends(get_pool_manager),
):
    """Verifica que el pool del edificio puede ejecutar una consulta."""
    result = pools.ping(building)
    return {"success": True, "building": building.name, "result": result}
