"""TempTabs API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map TempTabsError to structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Store, service container and periodic cleanup trigger are built in the lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Settings defaults are written to the store once on startup, before the
      first cleanup tick fires
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from temptabs.api.error_handlers import register_error_handlers
from temptabs.api.routes import health, items, maintenance, view
from temptabs.config import get_settings
from temptabs.infrastructure import database
from temptabs.infrastructure.observability import setup_logging
from temptabs.services.container import (
    build_container, init_container, reset_container,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    container = init_container(build_container(settings))
    if settings.store_backend == "sql" and settings.database_auto_create:
        await database.db_manager.create_all()
    await container.service.ensure_defaults()
    container.trigger.start()
    logger.info("TempTabs API started")
    yield
    logger.info("TempTabs API shutting down")
    await container.trigger.stop()
    if database.db_manager is not None:
        await database.db_manager.dispose()
    reset_container()


app = FastAPI(
    title="TempTabs API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(items.router)
app.include_router(view.router)
app.include_router(maintenance.router)

register_error_handlers(app)
