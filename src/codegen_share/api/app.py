"""FastAPI application factory for codegen-share."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from structlog import get_logger

from codegen_share import __version__
from codegen_share.api.lifecycle import (
    LifecycleComponent,
    execute_shutdown_sequence,
    execute_startup_sequence,
    log_server_start,
)
from codegen_share.api.middleware.errors import setup_error_handlers
from codegen_share.api.middleware.logging import AccessLogMiddleware
from codegen_share.api.middleware.request_id import RequestIDMiddleware
from codegen_share.api.routes.auth import router as auth_router
from codegen_share.api.routes.generate import router as generate_router
from codegen_share.api.routes.health import router as health_router
from codegen_share.api.routes.oauth import router as oauth_router
from codegen_share.api.routes.share import router as share_router
from codegen_share.config.settings import Settings, get_settings
from codegen_share.container import ServiceContainer, build_container
from codegen_share.core.logging import setup_logging
from codegen_share.utils.startup_helpers import (
    close_http_clients,
    initialize_database_startup,
    shutdown_database,
    start_maintenance_scheduler,
    stop_maintenance_scheduler,
)


logger = get_logger(__name__)


# Define lifecycle components for startup/shutdown organization
LIFECYCLE_COMPONENTS: list[LifecycleComponent] = [
    {
        "name": "Database",
        "startup": initialize_database_startup,
        "shutdown": shutdown_database,
    },
    {
        "name": "Maintenance Scheduler",
        "startup": start_maintenance_scheduler,
        "shutdown": stop_maintenance_scheduler,
    },
    {
        "name": "HTTP Clients",
        "startup": None,
        "shutdown": close_http_clients,
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager using component-based approach."""
    settings: Settings = app.state.settings

    # Startup
    log_server_start(settings)
    await execute_startup_sequence(LIFECYCLE_COMPONENTS, app, settings)

    yield

    # Shutdown
    logger.debug("server_stop")
    await execute_shutdown_sequence(LIFECYCLE_COMPONENTS, app)


def create_app(
    settings: Settings | None = None,
    container: ServiceContainer | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings override. If None, uses get_settings().
        container: Optional prebuilt services. If None, built from settings.

    Returns:
        Configured FastAPI application instance.

    """
    if settings is None:
        settings = container.settings if container else get_settings()

    # Needed for reload mode where the app is re-imported
    if not structlog.is_configured():
        setup_logging(
            json_logs=settings.server.json_logs,
            log_level_name=settings.server.log_level,
            log_file=settings.server.log_file,
        )

    if container is None:
        container = build_container(settings)

    app = FastAPI(
        title="codegen-share",
        description="AI code generation with accounts, quotas and expiring share links",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.container = container

    setup_error_handlers(app)

    # Added last so it runs first and binds the request id for the access log
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.include_router(health_router)
    app.include_router(auth_router, prefix="/api")
    app.include_router(generate_router, prefix="/api")
    app.include_router(share_router, prefix="/api")

    if container.oauth is not None:
        app.include_router(oauth_router, prefix="/auth")
    else:
        logger.debug("google_login_disabled")

    return app


def get_app() -> FastAPI:
    """Get the FastAPI application instance.

    Returns:
        FastAPI application instance.

    """
    return create_app()
