import logging
import os
import time
from typing import Callable, Optional, TypeVar

from dotenv import load_dotenv

from mesas.exceptions import TransientDataStoreError

load_dotenv()

logger = logging.getLogger(__name__)

T = TypeVar("T")

DB_RETRY_ATTEMPTS = int(os.getenv("DB_RETRY_ATTEMPTS", "3"))
DB_RETRY_BASE_DELAY = float(os.getenv("DB_RETRY_BASE_DELAY", "0.2"))
DB_RETRY_MAX_DELAY = 2.0


def _backoff_seconds(attempt: int, base_delay: float, max_delay: float) -> float:
    # base, 2*base, 4*base... hasta max_delay
    return min(base_delay * (2 ** max(0, attempt - 1)), max_delay)


def with_retry(
    operation: Callable[[], T],
    max_attempts: Optional[int] = None,
    base_delay: Optional[float] = None,
    max_delay: float = DB_RETRY_MAX_DELAY,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Ejecuta `operation` reintentando solo ante fallas transitorias del
    almacenamiento (DataStoreUnavailable, PoolExhausted).

    Errores de validación, conflicto, autorización, etc. se propagan en el
    primer intento. Agotados los intentos se relanza el último error.
    """
    attempts = max_attempts if max_attempts is not None else DB_RETRY_ATTEMPTS
    delay = base_delay if base_delay is not None else DB_RETRY_BASE_DELAY
    if attempts < 1:
        raise ValueError("max_attempts must be >= 1")

    for attempt in range(1, attempts + 1):
        try:
            return operation()
        except TransientDataStoreError as e:
            if attempt >= attempts:
                logger.error(f"Giving up after {attempt} attempts: {e!r}")
                raise
            wait = _backoff_seconds(attempt, delay, max_delay)
            logger.warning(
                f"Transient data store error (attempt {attempt}/{attempts}), "
                f"retrying in {wait:.2f}s: {e!r}"
            )
            sleep(wait)

    # no debería llegar acá
    raise RuntimeError("with_retry exited without result")
