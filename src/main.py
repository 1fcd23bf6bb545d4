"""
Application factory.

The database pool, the Redis handle and the PlayerService are built once in the lifespan and kept on `app.state`.
Routers only reach them through the dependencies in src/api/dependencies.py, so tests can swap any of them for fakes.
"""

import logging
import os
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from src.api.errors import register_exception_handlers
from src.api.routes import health, leaderboard, users
from src.core.config import Settings
from src.core.exceptions import DatabaseError
from src.core.log_setup import configure_logging
from src.db.cache import CacheHandle
from src.db.database import Database
from src.db.sql_repository import SQLGameHistoryRepository, SQLUserRepository
from src.services.player_service import PlayerService

logger = logging.getLogger(__name__)


async def connect_or_exit(database: Database) -> None:
    """Startup probe. The backend is useless without its database, so there is no retry: log and exit(1)."""
    try:
        await database.verify_connectivity()
    except DatabaseError as exc:
        logger.error("PostgreSQL connection error: %s", exc)
        logger.error(
            "HINT: Make sure PostgreSQL is running. Use: docker-compose up -d postgres"
        )
        sys.exit(1)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = app.state.settings

    database = Database.from_settings(settings)
    await connect_or_exit(database)

    cache = CacheHandle.from_settings(settings)
    await cache.connect()

    app.state.database = database
    app.state.cache = cache
    app.state.player_service = PlayerService(
        SQLUserRepository(database), SQLGameHistoryRepository(database)
    )
    try:
        yield
    finally:
        await cache.close()
        await database.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    app = FastAPI(title="Chess Platform Backend", lifespan=lifespan)
    app.state.settings = settings

    register_exception_handlers(app)
    app.include_router(health.router)
    app.include_router(leaderboard.router)
    app.include_router(users.router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=False,
    )
