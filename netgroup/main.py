"""Netgroup API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Every router carries the route-policy guard (api/guards.py)
    - Global error handlers map NetgroupError → structured JSON envelopes
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py to keep this module's imports small
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from netgroup.api.error_handlers import register_error_handlers
from netgroup.api.routes import (
    auth, dashboard, health, members, membership_intents, referrals,
)
from netgroup.config import get_settings
from netgroup.infrastructure.database import init_db
from netgroup.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Netgroup API started")
    yield
    logger.info("Netgroup API shutting down")


app = FastAPI(
    title="Netgroup API", version="1.0.0", lifespan=lifespan,
)

# CORS — configured from settings, not hardcoded
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Routes — explicit registration
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(membership_intents.router)
app.include_router(members.router)
app.include_router(referrals.router)
app.include_router(dashboard.router)
