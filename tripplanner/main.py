"""FastAPI application factory."""

import logging
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.routing import Match

from tripplanner.api.routes.activities import router as activities_router
from tripplanner.api.routes.admin import router as admin_router
from tripplanner.api.routes.auth import router as auth_router
from tripplanner.api.routes.cities import router as cities_router
from tripplanner.api.routes.health import router as health_router
from tripplanner.api.routes.metrics import router as metrics_router
from tripplanner.api.routes.trips import router as trips_router
from tripplanner.config import Settings, get_settings
from tripplanner.db.engine import create_async_engine_from_settings, create_session_factory
from tripplanner.db.models import Base
from tripplanner.errors import register_exception_handlers
from tripplanner.ratelimit import create_rate_limiter
from tripplanner.utils.logging import StructuredRequestLogger, configure_logging
from tripplanner.utils.metrics import request_metrics

API_TITLE = "Trip Planner API"
API_VERSION = "1.0.0"

logger = logging.getLogger(__name__)


def route_template(request: Request) -> str:
    """Path template of the matched route, so metric labels stay bounded."""
    for route in request.app.router.routes:
        match, _ = route.matches(request.scope)
        if match == Match.FULL:
            return getattr(route, "path", request.url.path)
    return "unmatched"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the database engine on startup and dispose of it on shutdown.

    An engine already placed on ``app.state`` (e.g. by tests) is reused and
    left for its owner to dispose.
    """
    settings: Settings = app.state.settings
    if not settings.jwt_secret:
        raise RuntimeError("JWT_SECRET must be set")

    owns_engine = getattr(app.state, "engine", None) is None
    if owns_engine:
        app.state.engine = create_async_engine_from_settings(settings)
        app.state.session_factory = create_session_factory(app.state.engine)

    if settings.auto_create_schema:
        async with app.state.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    logger.info("Application started", extra={"structured": {"version": API_VERSION}})
    try:
        yield
    finally:
        if owns_engine:
            await app.state.engine.dispose()
            app.state.engine = None


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application.

    Args:
        settings: Settings to use (defaults to the cached environment settings)

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(title=API_TITLE, version=API_VERSION, lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = None
    app.state.session_factory = None
    app.state.rate_limiter = create_rate_limiter(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.ui_origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    request_logger = StructuredRequestLogger()

    @app.middleware("http")
    async def observe_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        latency_ms = (time.perf_counter() - start) * 1000

        route = route_template(request)
        request_metrics.record_request(request.method, route, response.status_code, latency_ms)
        request_logger.log_request(request.method, route, response.status_code, latency_ms)
        return response

    register_exception_handlers(app)

    # Register routes
    app.include_router(health_router, tags=["health"])
    app.include_router(metrics_router, tags=["metrics"])
    app.include_router(auth_router)
    app.include_router(trips_router)
    app.include_router(cities_router)
    app.include_router(activities_router)
    app.include_router(admin_router)

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {"message": API_TITLE, "version": API_VERSION}

    return app


app = create_app()
