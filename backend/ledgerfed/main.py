"""Ledger Federation API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map FederationError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Both tier databases and the engine are created on startup via lifespan
      and exposed on app.state; nothing is opened at import time

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Three error handler layers registered from api/error_handlers.py
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ledgerfed.api.error_handlers import register_error_handlers
from ledgerfed.api.routes import health, ledgers
from ledgerfed.config import get_settings
from ledgerfed.infrastructure.database import init_databases
from ledgerfed.infrastructure.observability import setup_logging
from ledgerfed.services.federation import FederationEngine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    databases = init_databases(
        settings.hot_database_url,
        settings.cold_database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    app.state.databases = databases
    app.state.engine = FederationEngine.from_settings(databases, settings)
    logger.info(
        f"Ledger federation API started (retention {settings.retention_years}y)",
    )
    yield
    logger.info("Ledger federation API shutting down")
    await databases.dispose()


app = FastAPI(
    title="Ledger Federation API", version="1.0.0", lifespan=lifespan,
)

# CORS — configured from settings, not hardcoded
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# Routes — explicit registration
app.include_router(health.router)
app.include_router(ledgers.router)

register_error_handlers(app)
