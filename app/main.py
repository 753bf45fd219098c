import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from app.api.endpoints import attendance as attendance_endpoints
from app.api.endpoints import auth as auth_endpoints
from app.api.endpoints import matches as match_endpoints
from app.api.endpoints import players as player_endpoints
from app.api.endpoints import users as user_endpoints
from app.core.config import Settings, settings as default_settings
from app.core.logging_config import setup_logging
from app.core.seed import seed_demo_data
from app.services.auth_service import create_oauth_client
from app.storage.base import Storage
from app.storage.memory import MemStorage
from app.storage.sql import SqlStorage

logger = logging.getLogger(__name__)


def build_storage(settings: Settings) -> Storage:
    if settings.STORAGE_BACKEND == "memory":
        return MemStorage()
    if settings.STORAGE_BACKEND == "sql":
        return SqlStorage(settings.DATABASE_URL)
    raise ValueError(f"Unknown STORAGE_BACKEND '{settings.STORAGE_BACKEND}', expected 'memory' or 'sql'")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting Team Attendance API with {type(app.state.storage).__name__}")
    if app.state.settings.SEED_DEMO_DATA:
        seed_demo_data(app.state.storage)
    yield
    logger.info("Shutting down Team Attendance API")


def create_app(settings: Optional[Settings] = None, storage: Optional[Storage] = None) -> FastAPI:
    settings = settings or default_settings
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(title="Team Attendance API", lifespan=lifespan)
    app.state.settings = settings
    app.state.storage = storage if storage is not None else build_storage(settings)
    app.state.oauth = create_oauth_client(settings)

    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.SESSION_SECRET,
        max_age=settings.SESSION_MAX_AGE,
        same_site="lax",
    )

    # Include routers
    app.include_router(auth_endpoints.router, prefix="/api/auth", tags=["Authentication"])
    app.include_router(user_endpoints.router, prefix="/api/users", tags=["Users"])
    app.include_router(match_endpoints.router, prefix="/api/matches", tags=["Matches"])
    app.include_router(attendance_endpoints.router, prefix="/api/attendance", tags=["Attendance"])
    app.include_router(player_endpoints.router, prefix="/api/players", tags=["Players"])

    @app.get("/")
    async def root():
        return {"message": "Team Attendance API"}

    return app


app = create_app()
