"""
FastAPI application factory.

* Registers routes for accounts, rides, booking requests and bookings.
* Wires the notification dispatcher (providers built from settings unless
  one is injected).
* Maps the domain exception taxonomy onto HTTP responses.
* Applies rate-limiting middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging
import os
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError

from src.api.middleware import limiter
from src.api.routes import auth, bookings, health, rides
from src.config import settings
from src.domain.exceptions import CarpoolError, InternalError
from src.infrastructure.database import engine
from src.infrastructure.notifier import build_email_sender, build_sms_sender
from src.services.notifications import NotificationDispatcher

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Dispose of pooled DB connections on shutdown."""
    yield
    await engine.dispose()


# ── Exception handlers ────────────────────────────────────────────────


async def carpool_error_handler(request: Request, exc: CarpoolError) -> JSONResponse:
    content = {"detail": exc.message}
    if exc.errors:
        content["errors"] = exc.errors
    return JSONResponse(status_code=exc.status_code, content=content)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())[1:]) or None,
            "message": err.get("msg"),
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content=jsonable_encoder({"detail": "Invalid request data", "errors": errors}),
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return await carpool_error_handler(request, InternalError("Internal server error"))


def create_app(dispatcher: Optional[NotificationDispatcher] = None) -> FastAPI:
    app = FastAPI(
        title="Carpool Rides API",
        description=(
            "Publish car and bike rides, search the catalog and book seats. "
            "Drivers accept or reject booking requests; passengers are "
            "notified by email and SMS."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.dispatcher = dispatcher or NotificationDispatcher(
        email_sender=build_email_sender(settings),
        sms_sender=build_sms_sender(settings),
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Error mapping
    app.add_exception_handler(CarpoolError, carpool_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)

    # Routers
    app.include_router(health.router, prefix="/api")
    app.include_router(auth.router, prefix="/api")
    app.include_router(rides.router, prefix="/api")
    app.include_router(bookings.router, prefix="/api")

    # Static pages (optional)
    if settings.static_dir and os.path.isdir(settings.static_dir):
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")

    return app
