from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from mesas.exceptions import Forbidden, Unauthenticated
from mesas.models.user import UserRole
from mesas.services.auth import Identity, decode_access_token
from mesas.services.tenants import Building, get_building

bearer_scheme = HTTPBearer(auto_error=False)


def authorize(
    identity: Identity, building: Building, required_role: Optional[UserRole] = None
) -> Identity:
    """
    Un token emitido para un edificio nunca autoriza acciones en otro.
    Si la operación pide admin, además el rol tiene que ser admin.
    """
    if identity.building != building.name:
        raise Forbidden("Token does not belong to this building")
    if required_role == UserRole.ADMIN and not identity.is_admin:
        raise Forbidden("Admin role required")
    return identity


def get_token_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Identity:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise Unauthenticated("Missing bearer token")
    return decode_access_token(credentials.credentials)


def get_current_identity(
    building: Building = Depends(get_building),
    identity: Identity = Depends(get_token_identity),
) -> Identity:
    return authorize(identity, building)


def get_current_admin(
    building: Building = Depends(get_building),
    identity: Identity = Depends(get_token_identity),
) -> Identity:
    return authorize(identity, building, required_role=UserRole.ADMIN)
