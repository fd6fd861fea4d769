"""KringP API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers render every failure as {status: false, message, data}
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py; main.py only wires things up
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kringp.api.error_handlers import register_error_handlers
from kringp.api.routes import (
    app_settings, badges, bank_details, catalog, dashboard, groups, health,
    notifications, orders, password, products, ratings, social_media, support,
    users, wallet, work_posts,
)
from kringp.config import get_settings
from kringp.infrastructure.database import close_db, init_db
from kringp.infrastructure.observability import log_requests, setup_logging

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
    logger.info("KringP API started")
    yield
    await close_db()
    logger.info("KringP API shutting down")


app = FastAPI(title="KringP API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(log_requests)

app.include_router(health.router)
app.include_router(users.router)
app.include_router(password.router)
for catalog_router in catalog.routers:
    app.include_router(catalog_router)
app.include_router(social_media.router)
app.include_router(bank_details.router)
app.include_router(groups.router)
app.include_router(orders.router)
app.include_router(wallet.router)
app.include_router(ratings.router)
app.include_router(badges.router)
app.include_router(notifications.router)
app.include_router(work_posts.router)
app.include_router(products.router)
app.include_router(app_settings.router)
for support_router in support.routers:
    app.include_router(support_router)
app.include_router(dashboard.router)

register_error_handlers(app)
