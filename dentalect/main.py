"""DentaLect API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map DentalectError → structured JSON responses
    - CORS allow-list configured from settings (not hardcoded)
    - Missing store credentials at startup terminate the process (exit status 1)

Design Decisions:
    - Lifespan context manager owns logging setup, engine creation, seeding and disposal
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dentalect.api.error_handlers import register_error_handlers
from dentalect.api.routes import health, subject_files, subjects
from dentalect.config import Settings, get_settings, resolve_database_url
from dentalect.core.errors import ConfigurationError
from dentalect.core.sample_subjects import SAMPLE_SUBJECTS
from dentalect.infrastructure import database
from dentalect.infrastructure.observability import setup_logging
from dentalect.services.subject_store import SubjectStore

logger = logging.getLogger(__name__)


async def seed_sample_subjects(settings: Settings) -> int:
    """Seed the owner's collection with sample subjects if it is empty."""
    if not database.db_manager:
        raise RuntimeError("Database not initialized")
    async with database.db_manager.session() as db:
        store = SubjectStore(
            db, settings.owner_id, settings.store_max_conflict_retries,
        )
        return await store.seed_if_empty(SAMPLE_SUBJECTS)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    try:
        database_url = resolve_database_url(settings)
    except ConfigurationError as e:
        logger.critical(
            f"Cannot start: {e.message}",
            extra={"error_code": e.code},
        )
        raise SystemExit(1) from e
    database.init_db(
        database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if settings.seed_sample_subjects:
        await seed_sample_subjects(settings)
    logger.info(
        "DentaLect API started",
        extra={"owner_id": settings.owner_id},
    )
    yield
    await database.close_db()
    logger.info("DentaLect API shutting down")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    application = FastAPI(
        title="DentaLect API", version=health.SERVICE_VERSION, lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    application.include_router(health.router)
    application.include_router(subjects.router)
    application.include_router(subject_files.router)

    register_error_handlers(application)
    return application


app = create_app()
