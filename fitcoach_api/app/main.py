"""
Main entrypoint for the FitCoach Pro API.

This module assembles the FastAPI application: logging, CORS, gzip,
security headers, rate limiting, request logging, error handlers and
the versioned routers.
The ``create_app`` function builds and configures the app, which is
then instantiated at module import time as ``app``.  Importing the app
here makes it easy to run with uvicorn or another ASGI server, e.g.::

    uvicorn fitcoach_api.app.main:app --reload

Each call to ``create_app`` builds a fresh in-memory store, so tests
can create isolated applications freely.
"""

import logging
import time
from typing import Any, Callable, Dict, Optional

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from .api.v1.router import ENDPOINT_INDEX, router as v1_router
from .core.config import Settings, settings as default_settings
from .core.db import init_db
from .core.errors import register_exception_handlers
from .core.logging_config import setup_logging
from .core.ratelimit import build_limiter, rate_limit_exceeded_handler
from .core.security_headers import SecurityHeadersMiddleware
from .services.notification_service import NotificationSink
from .services.registry import build_services
from .services.resource_service import Clock, utcnow

logger = logging.getLogger(__name__)


def create_app(
    app_settings: Optional[Settings] = None,
    clock: Clock = utcnow,
    notifications: Optional[NotificationSink] = None,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    app_settings : Optional[Settings]
        Configuration to use.  Defaults to the module level settings
        read from the environment.
    clock : callable
        Source of the current time for timestamps and date based
        aggregates.
    notifications : Optional[NotificationSink]
        Push notification transport.  Defaults to a logging sink.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    app_settings = app_settings or default_settings
    # Initialise logging before anything else so that the setup below
    # can safely log messages.
    setup_logging(app_settings.log_level, app_settings.log_file or None)

    app = FastAPI(title=app_settings.project_name, version=app_settings.api_version, debug=app_settings.debug)

    store = init_db(seed=app_settings.seed_fixtures, clock=clock)
    app.state.settings = app_settings
    app.state.services = build_services(store, app_settings, clock, notifications)
    app.state.started_at = time.monotonic()

    limiter = build_limiter(app_settings)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(GZipMiddleware, minimum_size=app_settings.gzip_minimum_size)
    app.add_middleware(SecurityHeadersMiddleware, app_settings=app_settings)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    @app.middleware("http")
    async def request_logging(request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            # The server error handler logs the traceback once.
            logger.error("%s %s -> 500 (%.1f ms)", request.method, request.url.path, _elapsed_ms(started))
            raise
        logger.info(
            "%s %s -> %s (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            _elapsed_ms(started),
        )
        return response

    app.include_router(v1_router, prefix=app_settings.api_prefix)

    # Uptime checks are never throttled.
    @app.get("/health", tags=["health"])
    @limiter.exempt
    async def health() -> Dict[str, Any]:
        return {
            "status": "OK",
            "timestamp": clock(),
            "uptime": round(time.monotonic() - app.state.started_at, 3),
            "environment": app_settings.environment,
        }

    @app.get(app_settings.api_prefix, tags=["info"])
    async def api_index() -> Dict[str, Any]:
        return {
            "message": f"Welcome to {app_settings.project_name}",
            "version": app_settings.api_version,
            "endpoints": {name: app_settings.api_prefix + path for name, path in ENDPOINT_INDEX.items()},
            "documentation": "/docs",
        }

    logger.info("%s %s ready (%s)", app_settings.project_name, app_settings.api_version, app_settings.environment)
    return app


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
