from fastapi import APIRouter, Depends, status

from mesas.crud import user as user_crud
from mesas.database import PoolManager, get_pool_manager
from mesas.schemas.auth import LoginRequest, LoginResponse
from mesas.schemas.user import UserCreate, UserResponse
from mesas.services import auth as auth_service
from mesas.services.auth import Identity, get_password_hash
from mesas.services.authorization import get_current_admin
from mesas.services.tenants import Building, get_building

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
def login(
    credentials: LoginRequest,
    building: Building = Depends(get_building),
    pools: PoolManager = Depends(get_pool_manager),
):
    token = auth_service.login(
        pools, building, credentials.username, credentials.password
    )
    return LoginResponse(token=token)


@router.post(
    "/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED
)
def register(
    user: UserCreate,
    building: Building = Depends(get_building),
    pools: PoolManager = Depends(get_pool_manager),
    current_admin: Identity = Depends(get_current_admin),
):
    # Solo un admin del mismo edificio puede dar de alta usuarios
    hashed_password = get_password_hash(user.password)
    return pools.run(
        building,
        lambda db: user_crud.create_user(db, building.name, user, hashed_password),
    )
