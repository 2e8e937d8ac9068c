import logging
import os
import time
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable, Dict, Optional

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

RESERVATIONS_CACHE_TTL_SECONDS = float(os.getenv("RESERVATIONS_CACHE_TTL_SECONDS", "300"))


@dataclass
class CacheEntry:
    value: Any
    expires_at: float


class ReservationsCache:
    """
    Cache en memoria del listado de reservas, una entrada por edificio.

    El lock solo protege las operaciones sobre el diccionario: la lectura a
    la base ante un miss ocurre fuera del lock, así que un edificio nunca
    bloquea a otro. Cada invalidate() incrementa la generación del edificio;
    put() descarta listados leídos antes de la última invalidación.

    Es por proceso: con varias instancias no hay coherencia entre ellas.
    """

    def __init__(
        self,
        ttl_seconds: float = RESERVATIONS_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._generations: Dict[str, int] = {}
        self._lock = Lock()

    def get(self, building: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(building)
            if entry is None:
                return None
            if entry.expires_at <= self._clock():
                del self._entries[building]
                return None
            return entry.value

    def generation(self, building: str) -> int:
        with self._lock:
            return self._generations.get(building, 0)

    def put(self, building: str, value: Any, generation: Optional[int] = None) -> bool:
        with self._lock:
            current = self._generations.get(building, 0)
            if generation is not None and generation != current:
                # hubo una escritura mientras se leía: el listado ya es viejo
                return False
            self._entries[building] = CacheEntry(
                value=value, expires_at=self._clock() + self.ttl_seconds
            )
            return True

    def invalidate(self, building: str) -> None:
        with self._lock:
            self._entries.pop(building, None)
            self._generations[building] = self._generations.get(building, 0) + 1
        logger.debug(f"Reservations cache invalidated for building {building}")

    def get_or_load(self, building: str, loader: Callable[[], Any]) -> Any:
        cached = self.get(building)
        if cached is not None:
            return cached

        generation = self.generation(building)
        value = loader()
        self.put(building, value, generation=generation)
        return value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
