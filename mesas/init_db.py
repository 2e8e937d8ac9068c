import logging
import os

from dotenv import load_dotenv

from mesas.crud import table as table_crud
from mesas.crud import turn as turn_crud
from mesas.crud import user as user_crud
from mesas.database import PoolManager
from mesas.models.user import UserRole
from mesas.schemas.user import UserCreate
from mesas.services.auth import get_password_hash
from mesas.services.tenants import BootstrapAdmin, Building

load_dotenv()

logger = logging.getLogger(__name__)

ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")


def _bootstrap_admin_for(building: Building):
    if building.admin is not None:
        return building.admin
    if ADMIN_PASSWORD:
        return BootstrapAdmin(username=ADMIN_USERNAME, password=ADMIN_PASSWORD)
    return None


def create_initial_admins(pools: PoolManager):
    """
    Crea el admin inicial de cada edificio si todavía no tiene usuarios.

    Las credenciales salen de la configuración del edificio o, si no hay,
    de ADMIN_USERNAME / ADMIN_PASSWORD.
    """
    for building in pools.registry:
        admin = _bootstrap_admin_for(building)
        if admin is None:
            logger.info(f"No bootstrap admin configured for building {building.name}")
            continue

        if pools.run(building, lambda db: user_crud.count_users(db, building.name)) > 0:
            logger.info(f"Building {building.name} already has users, skipping admin")
            continue

        user = UserCreate(
            username=admin.username, password=admin.password, role=UserRole.ADMIN
        )
        hashed_password = get_password_hash(admin.password)
        pools.run(
            building,
            lambda db: user_crud.create_user(db, building.name, user, hashed_password),
        )
        logger.info(f"Admin creado: {admin.username} | building={building.name}")


def create_reference_data(pools: PoolManager):
    """
    Carga las mesas y turnos configurados de cada edificio.

    Igual que con el admin inicial, sólo se insertan si el edificio todavía
    no tiene ninguno, así que reiniciar el servicio no los duplica.
    """
    for building in pools.registry:
        if building.tables:
            if pools.run(building, lambda db: table_crud.count_tables(db, building.name)):
                logger.info(f"Building {building.name} already has tables, skipping")
            else:
                pools.run(
                    building,
                    lambda db: table_crud.create_tables(db, building.name, building.tables),
                )
                logger.info(
                    f"Mesas creadas: {len(building.tables)} | building={building.name}"
                )

        if building.turns:
            if pools.run(building, lambda db: turn_crud.count_turns(db, building.name)):
                logger.info(f"Building {building.name} already has turns, skipping")
            else:
                pools.run(
                    building,
                    lambda db: turn_crud.create_turns(db, building.name, building.turns),
                )
                logger.info(
                    f"Turnos creados: {', '.join(building.turns)} | building={building.name}"
                )
