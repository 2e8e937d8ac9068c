from contextlib import asynccontextmanager
from typing import Optional
import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

# Load .env variables
load_dotenv()

# Configure base logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("mesas")

import mesas.models  # noqa: F401  registra todos los modelos en Base.metadata
from mesas.database import PoolManager
from mesas.exceptions import ReservationError, TransientDataStoreError
from mesas.init_db import create_initial_admins, create_reference_data
from mesas.routers import auth, buildings, reservations, tables, turns
from mesas.services.cache import ReservationsCache
from mesas.services.reservations import ReservationLedger
from mesas.services.tenants import TenantRegistry, load_registry

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS", "http://localhost:3001,http://localhost:5173"
    ).split(",")
    if origin.strip()
]


def create_app(
    registry: Optional[TenantRegistry] = None,
    cache: Optional[ReservationsCache] = None,
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Sin edificios o sin pools no hay nada que servir: el arranque falla
        app.state.registry = registry if registry is not None else load_registry()
        app.state.pools = PoolManager(app.state.registry)
        app.state.pools.create_all()

        logger.info("Initializing buildings with bootstrap admins...")
        create_initial_admins(app.state.pools)
        create_reference_data(app.state.pools)

        app.state.cache = cache if cache is not None else ReservationsCache()
        app.state.ledger = ReservationLedger(app.state.pools, app.state.cache)
        try:
            yield
        finally:
            app.state.cache.clear()
            app.state.pools.dispose()

    app = FastAPI(
        title="Mesas API",
        description="API for reserving tables by turn across buildings",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )

    # Include routers
    app.include_router(buildings.router, tags=["buildings"])
    app.include_router(auth.router, prefix="/{building}/api", tags=["authentication"])
    app.include_router(tables.router, prefix="/{building}/api", tags=["tables"])
    app.include_router(turns.router, prefix="/{building}/api", tags=["turns"])
    app.include_router(
        reservations.router, prefix="/{building}/api", tags=["reservations"]
    )

    @app.get("/")
    def read_root():
        return {"message": "Welcome to Mesas API"}

    _register_exception_handlers(app)
    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ReservationError)
    async def reservation_error_handler(request: Request, exc: ReservationError):
        if isinstance(exc, TransientDataStoreError):
            # El detalle de la falla queda en el log, no en la respuesta
            logger.error(
                "Data store failure | path=%s | method=%s | error=%r",
                request.url.path,
                request.method,
                exc.__cause__ or exc,
            )
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return JSONResponse(
            status_code=exc.status_code, content=exc.to_dict(), headers=headers
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        return JSONResponse(
            status_code=400,
            content={
                "error": "Invalid request",
                "details": jsonable_encoder(exc.errors()),
            },
        )

    # Global unhandled exception handler -> logs ERROR
    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(
            "Unhandled error | path=%s | method=%s | client=%s",
            request.url.path,
            request.method,
            request.client.host if request.client else "unknown",
        )
        return JSONResponse(status_code=500, content={"error": "Internal Server Error"})


app = create_app()


if __name__ == "__main__":
    uvicorn.run("mesas.main:app", host="0.0.0.0", port=3001, reload=True)
