import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI

from files_manager.clients.cache import RedisClient
from files_manager.clients.db import DBClient
from files_manager.clients.storage import build_payload_store
from files_manager.core.config import Settings, get_settings
from files_manager.core.errors import add_exception_handlers
from files_manager.core.logging import setup_logging
from files_manager.routers import auth, files, status, users
from files_manager.services.files import FileService
from files_manager.services.sessions import SessionManager
from files_manager.services.users import UserService

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    *,
    db: Optional[DBClient] = None,
    cache: Optional[RedisClient] = None,
    storage=None,
) -> FastAPI:
    """Build the app with one handle per store, shared by every request."""
    settings = settings or get_settings()
    db = db or DBClient(settings.mongo_url, settings.db_database)
    cache = cache or RedisClient(settings.redis_url)
    storage = storage or build_payload_store(settings)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        await db.connect()
        await cache.connect()
        try:
            yield
        finally:
            await cache.close()
            await db.close()

    app = FastAPI(title="files-manager", lifespan=lifespan)

    app.state.settings = settings
    app.state.db = db
    app.state.cache = cache
    app.state.sessions = SessionManager(db, cache, ttl=settings.session_ttl_seconds)
    app.state.users = UserService(db)
    app.state.files = FileService(db, storage, page_size=settings.page_size)

    add_exception_handlers(app)

    # include our routers
    app.include_router(status.router)
    app.include_router(users.router)
    app.include_router(auth.router)
    app.include_router(files.router)
    return app


def run() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    logger.info("Server running on port %s", settings.port)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
