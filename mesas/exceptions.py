"""
Errores de dominio de la API de reservas.

Cada error lleva el status HTTP con el que se responde y un mensaje
apto para el cliente. Los handlers de main.py los convierten en
{"error": ..., "details": ...}.
"""
from typing import Any, Optional


class ReservationError(Exception):
    status_code = 500
    message = "Internal Server Error"

    def __init__(self, message: Optional[str] = None, details: Any = None):
        self.message = message or self.message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(ReservationError):
    status_code = 400
    message = "Invalid request"


class SlotConflict(ReservationError):
    status_code = 400
    message = "Slot already reserved"


class DuplicateUser(ReservationError):
    status_code = 400
    message = "Username already registered"


class Unauthenticated(ReservationError):
    status_code = 401
    message = "Could not validate credentials"


class InvalidCredentials(Unauthenticated):
    message = "Incorrect username or password"


class InvalidToken(Unauthenticated):
    message = "Invalid token"


class TokenExpired(Unauthenticated):
    message = "Token expired"


class Forbidden(ReservationError):
    status_code = 403
    message = "Forbidden"


class NotFound(ReservationError):
    status_code = 404
    message = "Not found"


class TenantNotFound(NotFound):
    message = "Building not found"


class ReservationNotFound(NotFound):
    message = "Reservation not found"


class TransientDataStoreError(ReservationError):
    """Fallas de infraestructura que admiten reintento."""

    status_code = 500
    message = "Data store temporarily unavailable"


class DataStoreUnavailable(TransientDataStoreError):
    pass


class PoolExhausted(TransientDataStoreError):
    message = "No database connections available"
