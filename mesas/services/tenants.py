import json
import logging
import os
import re
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from dotenv import load_dotenv
from fastapi import Path as PathParam, Request
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator

from mesas.exceptions import TenantNotFound

load_dotenv()

logger = logging.getLogger(__name__)

TENANTS_CONFIG = os.getenv("TENANTS_CONFIG", "tenants.json")

_SEPARATORS = re.compile(r"[\s_\-]+")


def normalize_building_name(value: str) -> str:
    """
    Normaliza el nombre de un edificio tal como llega en la URL.

    "Torre_X", "torre x" y "TORRE-X" quedan todos como "torre-x".
    """
    if value is None:
        return ""
    return _SEPARATORS.sub("-", value.strip().lower()).strip("-")


class PoolSettings(BaseModel):
    max_size: int = Field(10, ge=1)
    max_overflow: int = Field(0, ge=0)
    # Edad máxima de una conexión antes de reemplazarla (no es un timeout de inactividad)
    recycle_seconds: int = Field(1800, ge=1)
    acquire_timeout_seconds: float = Field(30, gt=0)
    request_timeout_seconds: float = Field(30, gt=0)


class BootstrapAdmin(BaseModel):
    username: str
    password: str


class TableSeed(BaseModel):
    number: int = Field(..., gt=0)
    capacity: int = Field(4, gt=0)

    class Config:
        frozen = True


class Building(BaseModel):
    name: str
    database_url: str
    pool: PoolSettings = Field(default_factory=PoolSettings)
    admin: Optional[BootstrapAdmin] = None
    # Mesas y turnos que se cargan al arrancar si el edificio no tiene ninguno
    tables: Tuple[TableSeed, ...] = ()
    turns: Tuple[str, ...] = ()

    class Config:
        frozen = True

    @field_validator("name")
    @classmethod
    def _normalize_name(cls, value: str) -> str:
        normalized = normalize_building_name(value)
        if not normalized:
            raise ValueError("building name cannot be empty")
        return normalized


class TenantsConfig(BaseModel):
    buildings: List[Building]

    @field_validator("buildings")
    @classmethod
    def _unique_names(cls, buildings: List[Building]) -> List[Building]:
        if not buildings:
            raise ValueError("at least one building must be configured")
        seen = set()
        for building in buildings:
            if building.name in seen:
                raise ValueError(f"duplicate building name: {building.name}")
            seen.add(building.name)
        return buildings


class TenantConfigError(RuntimeError):
    pass


class TenantRegistry:
    """Edificios conocidos, indexados por nombre normalizado. Inmutable."""

    def __init__(self, buildings: List[Building]):
        config = TenantsConfig(buildings=buildings)
        self._buildings: Dict[str, Building] = {b.name: b for b in config.buildings}

    def resolve(self, path_segment: str) -> Building:
        building = self._buildings.get(normalize_building_name(path_segment))
        if building is None:
            raise TenantNotFound()
        return building

    def names(self) -> List[str]:
        return sorted(self._buildings)

    def __iter__(self):
        return iter(self._buildings.values())

    def __len__(self) -> int:
        return len(self._buildings)


def load_registry(path: Optional[str] = None) -> TenantRegistry:
    """
    Carga la configuración de edificios desde un JSON:

        {"buildings": [{"name": "vow", "database_url": "postgresql://..."}]}

    Cualquier problema es un error de arranque.
    """
    config_path = Path(path or TENANTS_CONFIG)
    if not config_path.exists():
        raise TenantConfigError(f"Tenants config not found: {config_path}")

    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
        config = TenantsConfig.model_validate(raw)
    except (json.JSONDecodeError, PydanticValidationError) as e:
        raise TenantConfigError(f"Invalid tenants config {config_path}: {e}") from e

    registry = TenantRegistry(config.buildings)
    logger.info(f"Loaded {len(registry)} buildings: {', '.join(registry.names())}")
    return registry


def get_registry(request: Request) -> TenantRegistry:
    return request.app.state.registry


def get_building(
    request: Request,
    building: str = PathParam(..., description="Building (tenant) name"),
) -> Building:
    return get_registry(request).resolve(building)
