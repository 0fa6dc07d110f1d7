"""throwres demo API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Signal interceptor registered after routes, before the generic catch-all
    - The DispatchInterceptor instance is built here and passed in explicitly
    - Logging configured on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - create_app() factory: tests build isolated apps with their own settings
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from throwres.api.error_handlers import register_error_handlers
from throwres.api.routes import demo, health
from throwres.config import Settings, get_settings
from throwres.infrastructure.observability import setup_logging
from throwres.services.dispatch_interceptor import DispatchInterceptor

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle, configured from the settings the app was built with."""
    settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)
    logger.info("throwres demo API started")
    yield
    logger.info("throwres demo API shutting down")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the demo app with routes, CORS and error handlers wired."""
    settings = settings or get_settings()
    app = FastAPI(title=settings.app_title, version="1.0.0", lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(demo.router)

    interceptor = DispatchInterceptor(log_level=settings.signal_log_level)
    register_error_handlers(app, interceptor)
    return app


app = create_app()
