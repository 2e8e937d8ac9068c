import logging
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, Optional, TypeVar

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy import exc as sa_exc
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from mesas.exceptions import DataStoreUnavailable, PoolExhausted
from mesas.services.tenants import Building, TenantRegistry
from mesas.utils.retry import with_retry

logger = logging.getLogger(__name__)

Base = declarative_base()

T = TypeVar("T")


def _engine_options(building: Building) -> dict:
    url = make_url(building.database_url)
    pool = building.pool

    if url.get_backend_name() == "sqlite":
        options = {
            "connect_args": {
                "check_same_thread": False,
                "timeout": pool.request_timeout_seconds,
            }
        }
        if url.database in (None, "", ":memory:"):
            # Una sola conexión compartida, si no cada checkout ve una base vacía
            options["poolclass"] = StaticPool
        else:
            options.update(
                pool_size=pool.max_size,
                max_overflow=pool.max_overflow,
                pool_timeout=pool.acquire_timeout_seconds,
                pool_recycle=pool.recycle_seconds,
            )
        return options

    options = {
        "pool_size": pool.max_size,
        "max_overflow": pool.max_overflow,
        "pool_timeout": pool.acquire_timeout_seconds,
        "pool_recycle": pool.recycle_seconds,
        "pool_pre_ping": True,
    }
    if url.get_backend_name() == "postgresql":
        statement_timeout_ms = int(pool.request_timeout_seconds * 1000)
        options["connect_args"] = {
            "connect_timeout": max(1, int(pool.acquire_timeout_seconds)),
            "options": f"-c statement_timeout={statement_timeout_ms}",
        }
    return options


class PoolManager:
    """
    Un pool de conexiones por edificio.

    Las sesiones solo se obtienen a través de session_scope(), que garantiza
    devolver la conexión al pool tanto si la operación termina bien como si
    falla, y traduce las fallas de infraestructura a PoolExhausted /
    DataStoreUnavailable.
    """

    def __init__(self, registry: TenantRegistry):
        self.registry = registry
        self._engines: Dict[str, Engine] = {}
        self._sessions: Dict[str, sessionmaker] = {}

        for building in registry:
            engine = create_engine(building.database_url, **_engine_options(building))
            self._engines[building.name] = engine
            self._sessions[building.name] = sessionmaker(
                bind=engine, autocommit=False, autoflush=False, expire_on_commit=False
            )
            logger.info(
                f"Pool created for building {building.name} "
                f"(max_size={building.pool.max_size})"
            )

    def engine(self, building: Building) -> Engine:
        return self._engines[building.name]

    def create_all(self) -> None:
        for name, engine in self._engines.items():
            Base.metadata.create_all(bind=engine)
            logger.info(f"Schema ready for building {name}")

    @contextmanager
    def session_scope(self, building: Building) -> Iterator[Session]:
        db = self._sessions[building.name]()
        try:
            yield db
        except sa_exc.TimeoutError as e:
            _safe_rollback(db)
            logger.warning(f"Pool exhausted for building {building.name}: {e}")
            raise PoolExhausted() from e
        except (sa_exc.OperationalError, sa_exc.InterfaceError, sa_exc.DisconnectionError) as e:
            _safe_rollback(db)
            logger.warning(f"Data store unavailable for building {building.name}: {e}")
            raise DataStoreUnavailable() from e
        except Exception:
            _safe_rollback(db)
            raise
        finally:
            db.close()

    def with_connection(self, building: Building, operation: Callable[[Session], T]) -> T:
        with self.session_scope(building) as db:
            return operation(db)

    def run(
        self,
        building: Building,
        operation: Callable[[Session], T],
        retry: bool = True,
        max_attempts: Optional[int] = None,
    ) -> T:
        if not retry:
            return self.with_connection(building, operation)
        return with_retry(
            lambda: self.with_connection(building, operation),
            max_attempts=max_attempts,
        )

    def ping(self, building: Building) -> int:
        return self.run(building, lambda db: db.execute(text("SELECT 1 + 1")).scalar())

    def dispose(self) -> None:
        for name, engine in self._engines.items():
            engine.dispose()
            logger.info(f"Pool disposed for building {name}")
        self._engines.clear()
        self._sessions.clear()


def _safe_rollback(db: Session) -> None:
    try:
        db.rollback()
    except sa_exc.SQLAlchemyError as e:
        # la conexión pudo haberse perdido; se descarta al cerrar la sesión
        logger.debug(f"Rollback failed: {e}")


def get_pool_manager(request: Request) -> PoolManager:
    return request.app.state.pools
