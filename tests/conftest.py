"""
Configuración compartida para tests pytest
"""
import pytest
from fastapi.testclient import TestClient

# Importar todos los modelos para que queden registrados en Base.metadata
from mesas.models.user import User, UserRole
from mesas.models.table import Table
from mesas.models.turn import Turn
from mesas.models.reservation import Reservation

from mesas.database import PoolManager
from mesas.main import create_app
from mesas.services.cache import ReservationsCache
from mesas.services.reservations import ReservationLedger
from mesas.services.tenants import Building, TenantRegistry


# Bases de datos en memoria para tests: una por edificio
MEMORY_URL = "sqlite:///:memory:"


def make_registry(*buildings):
    return TenantRegistry(list(buildings))


def seed_reference_data(pools, building, tables=3, turns=("Almuerzo", "Cena")):
    """Crea mesas y turnos del edificio y devuelve sus ids."""

    def _seed(db):
        db_tables = [
            Table(building=building.name, number=n, capacity=4)
            for n in range(1, tables + 1)
        ]
        db_turns = [Turn(building=building.name, name=name) for name in turns]
        db.add_all(db_tables + db_turns)
        db.commit()
        return [t.id for t in db_tables], [t.id for t in db_turns]

    return pools.run(building, _seed)


@pytest.fixture
def vow():
    return Building(
        name="vow",
        database_url=MEMORY_URL,
        admin={"username": "admin", "password": "pw1"},
    )


@pytest.fixture
def torre_x():
    return Building(
        name="Torre_X",
        database_url=MEMORY_URL,
        admin={"username": "admin", "password": "pw2"},
    )


@pytest.fixture
def registry(vow, torre_x):
    return make_registry(vow, torre_x)


@pytest.fixture
def pools(registry):
    """Pools de test con el esquema creado, liberados al terminar"""
    manager = PoolManager(registry)
    manager.create_all()
    try:
        yield manager
    finally:
        manager.dispose()


@pytest.fixture
def cache():
    return ReservationsCache(ttl_seconds=300)


@pytest.fixture
def ledger(pools, cache):
    return ReservationLedger(pools, cache)


@pytest.fixture
def app(registry, cache):
    return create_app(registry=registry, cache=cache)


@pytest.fixture
def client(app):
    """Cliente HTTP con el lifespan corriendo (pools creados, admins iniciales)"""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def reference(app, client, vow, torre_x):
    """Mesas y turnos de cada edificio: {"vow": (table_ids, turn_ids), ...}"""
    pools = app.state.pools
    return {
        "vow": seed_reference_data(pools, vow),
        "torre-x": seed_reference_data(pools, torre_x),
    }


def login(client, building, username, password):
    response = client.post(
        f"/{building}/api/login", json={"username": username, "password": password}
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def vow_admin(client):
    return login(client, "vow", "admin", "pw1")


@pytest.fixture
def torre_admin(client):
    return login(client, "torre-x", "admin", "pw2")


@pytest.fixture
def vow_member(client, vow_admin):
    response = client.post(
        "/vow/api/register",
        json={
            "username": "ana",
            "password": "secreto",
            "phone": "+54 11 5555-0000",
            "email": "ana@example.com",
        },
        headers=vow_admin,
    )
    assert response.status_code == 201, response.text
    return login(client, "vow", "ana", "secreto")


@pytest.fixture
def login_as(client):
    def _login(building, username, password):
        return login(client, building, username, password)

    return _login
