"""Invoice API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map InvoiceApiError → failure envelope
    - CORS configured from settings (not hardcoded)
    - Database manager and persistence gateway built once in the lifespan and
      stored on app.state; routes receive them through dependencies

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - attach_database() shared by the lifespan and test fixtures so both wire
      the gateway the same way
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from invoice_api.api.error_handlers import register_error_handlers
from invoice_api.api.routes import customers, health, invoices
from invoice_api.config import get_settings
from invoice_api.infrastructure.database import DatabaseSessionManager
from invoice_api.infrastructure.gateway import SqlAlchemyGateway
from invoice_api.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


def attach_database(app: FastAPI, db_manager: DatabaseSessionManager) -> None:
    """Expose the session manager and its gateway to request dependencies."""
    app.state.db_manager = db_manager
    app.state.gateway = SqlAlchemyGateway(db_manager)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    db_manager = DatabaseSessionManager(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if settings.database_create_tables:
        await db_manager.create_tables()
    attach_database(app, db_manager)
    logger.info("Invoice API started")
    yield
    logger.info("Invoice API shutting down")
    await db_manager.dispose()


app = FastAPI(
    title="Invoice API", version="1.0.0", lifespan=lifespan,
)

# CORS from settings
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """One log line per request: method, path, status, duration."""
    started = time.perf_counter()
    response = await call_next(request)
    duration_ms = round((time.perf_counter() - started) * 1000, 2)
    logger.info(
        f"{request.method} {request.url.path} {response.status_code}",
        extra={
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        },
    )
    return response


# Routes: explicit registration
app.include_router(health.router)
app.include_router(customers.router)
app.include_router(invoices.router)

register_error_handlers(app)
