"""
Tests para la resolución de edificios por nombre
"""
import json

import pytest
from pydantic import ValidationError as PydanticValidationError

from mesas.exceptions import TenantNotFound
from mesas.services.tenants import (
    Building,
    TenantConfigError,
    TenantRegistry,
    load_registry,
    normalize_building_name,
)


@pytest.mark.parametrize(
    "raw", ["Torre_X", "torre x", "TORRE-X", "  torre__x ", "Torre - X"]
)
def test_normalize_building_name_variants(raw):
    assert normalize_building_name(raw) == "torre-x"


def test_registry_resolves_all_spellings_to_same_building(registry):
    building = registry.resolve("Torre_X")

    assert registry.resolve("torre x") is building
    assert registry.resolve("TORRE-X") is building
    assert building.name == "torre-x"


def test_registry_unknown_building_raises_not_found(registry):
    with pytest.raises(TenantNotFound):
        registry.resolve("edificio-inexistente")


def test_registry_names_are_sorted_and_normalized(registry):
    assert registry.names() == ["torre-x", "vow"]


def test_registry_rejects_duplicate_normalized_names():
    with pytest.raises(PydanticValidationError):
        TenantRegistry(
            [
                Building(name="Torre_X", database_url="sqlite://"),
                Building(name="torre x", database_url="sqlite://"),
            ]
        )


def test_registry_rejects_empty_configuration():
    with pytest.raises(PydanticValidationError):
        TenantRegistry([])


def test_load_registry_from_file(tmp_path):
    config = tmp_path / "tenants.json"
    config.write_text(
        json.dumps(
            {
                "buildings": [
                    {"name": "vow", "database_url": "sqlite://"},
                    {
                        "name": "Torre X",
                        "database_url": "sqlite://",
                        "pool": {"max_size": 5, "acquire_timeout_seconds": 2},
                    },
                ]
            }
        )
    )

    registry = load_registry(str(config))

    assert registry.names() == ["torre-x", "vow"]
    assert registry.resolve("torre_x").pool.max_size == 5
    assert registry.resolve("vow").pool.max_size == 10


def test_load_registry_missing_file_fails(tmp_path):
    with pytest.raises(TenantConfigError):
        load_registry(str(tmp_path / "no-existe.json"))


def test_load_registry_invalid_file_fails(tmp_path):
    config = tmp_path / "tenants.json"
    config.write_text(json.dumps({"buildings": [{"name": "vow"}]}))

    with pytest.raises(TenantConfigError):
        load_registry(str(config))


def test_load_registry_with_reference_data(tmp_path):
    config = tmp_path / "tenants.json"
    config.write_text(
        json.dumps(
            {
                "buildings": [
                    {
                        "name": "vow",
                        "database_url": "sqlite://",
                        "pool": {"recycle_seconds": 600},
                        "tables": [{"number": 1}, {"number": 2, "capacity": 8}],
                        "turns": ["Almuerzo", "Cena"],
                    }
                ]
            }
        )
    )

    vow = load_registry(str(config)).resolve("vow")

    assert [(t.number, t.capacity) for t in vow.tables] == [(1, 4), (2, 8)]
    assert vow.turns == ("Almuerzo", "Cena")
    assert vow.pool.recycle_seconds == 600


def test_reference_data_is_optional():
    building = Building(name="vow", database_url="sqlite://")

    assert building.tables == ()
    assert building.turns == ()
