from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
import logging
import os
from dotenv import load_dotenv
import warnings

from mesas.crud import user as user_crud
from mesas.database import PoolManager
from mesas.exceptions import InvalidCredentials, InvalidToken, TokenExpired
from mesas.models.user import UserRole
from mesas.services.tenants import Building

# Suppress the bcrypt warning
warnings.filterwarnings("ignore", ".*bcrypt version.*")
warnings.filterwarnings("ignore", ".*trapped.*error reading bcrypt version.*")

load_dotenv()

logger = logging.getLogger(__name__)

# Security configuration
SECRET_KEY = os.getenv("SECRET_KEY", "super_secreto")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(
    os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60")
)  # 1 hora por defecto; es el único mecanismo de revocación

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=12,
)


@dataclass(frozen=True)
class Identity:
    username: str
    building: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    return pwd_context.hash(password)


def create_access_token(
    username: str,
    building: str,
    role: UserRole,
    expires_delta: Optional[timedelta] = None,
) -> str:
    now = datetime.utcnow()
    expire = now + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {
        "sub": username,
        "building": building,
        "role": UserRole(role).value,
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> Identity:
    """Verifica firma y vencimiento. Cualquier payload malformado es InvalidToken."""
    if not token:
        raise InvalidToken()
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        raise TokenExpired()
    except JWTError:
        raise InvalidToken()

    username = payload.get("sub")
    building = payload.get("building")
    role = payload.get("role")
    if not isinstance(username, str) or not username:
        raise InvalidToken()
    if not isinstance(building, str) or not building:
        raise InvalidToken()
    if "exp" not in payload:
        raise InvalidToken()
    try:
        role = UserRole(role)
    except ValueError:
        raise InvalidToken()

    return Identity(username=username, building=building, role=role)


def authenticate_user(
    pools: PoolManager, building: Building, username: str, password: str
):
    user = pools.run(
        building, lambda db: user_crud.get_user(db, building.name, username)
    )
    if user is None:
        # Mismo costo que una verificación real, para no revelar qué usuarios existen
        pwd_context.dummy_verify()
        logger.info(f"Login failed: unknown user {username} | building={building.name}")
        return None

    if not verify_password(password, user.hashed_password):
        logger.info(f"Login failed: bad password for {username} | building={building.name}")
        return None

    return user


def login(pools: PoolManager, building: Building, username: str, password: str) -> str:
    user = authenticate_user(pools, building, username, password)
    if not user:
        raise InvalidCredentials()
    return create_access_token(
        username=user.username, building=building.name, role=user.role
    )
