"""Milestone Fund API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map FundraisingError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database and per-project lock timeout initialized on startup via lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.error_handlers import register_error_handlers
from app.api.routes import (
    applications, donations, health, milestones, projects, stats,
)
from app.config import get_settings
from app.infrastructure import database
from app.infrastructure.observability import setup_logging
from app.infrastructure.project_locks import project_locks

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    project_locks.acquire_timeout = settings.project_lock_timeout_seconds
    logger.info("Milestone Fund API started")
    yield
    if database.db_manager:
        await database.db_manager.dispose()
    logger.info("Milestone Fund API shutting down")


app = FastAPI(
    title="Milestone Fund API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(applications.router)
app.include_router(donations.router)
app.include_router(milestones.router)
app.include_router(projects.router)
app.include_router(stats.router)

register_error_handlers(app)
