import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from mesas.exceptions import DuplicateUser
from mesas.models.user import User
from mesas.schemas.user import UserCreate

logger = logging.getLogger(__name__)


def get_user(db: Session, building: str, username: str) -> Optional[User]:
    return (
        db.query(User)
        .filter(User.building == building, User.username == username)
        .first()
    )


def count_users(db: Session, building: str) -> int:
    return db.query(User).filter(User.building == building).count()


def create_user(
    db: Session, building: str, user: UserCreate, hashed_password: str
) -> User:
    """
    Inserta el usuario si no existe en el edificio.

    La restricción única (building, username) es la que decide ante dos
    registros simultáneos; la consulta previa solo da un error más claro.
    """
    if get_user(db, building, user.username) is not None:
        raise DuplicateUser()

    db_user = User(
        building=building,
        username=user.username,
        hashed_password=hashed_password,
        role=user.role,
        phone=user.phone,
        email=user.email,
    )
    db.add(db_user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateUser() from e

    logger.info(f"User {user.username} registered in building {building}")
    return db_user
