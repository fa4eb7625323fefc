"""Startup and shutdown steps of the application lifespan.

Each function takes the app (and settings for startup) and works on the
service container stored in ``app.state.container``.
"""

from fastapi import FastAPI
from structlog import get_logger

from codegen_share.config.settings import Settings
from codegen_share.container import ServiceContainer


logger = get_logger(__name__)


def _container(app: FastAPI) -> ServiceContainer:
    container: ServiceContainer = app.state.container
    return container


async def initialize_database_startup(app: FastAPI, settings: Settings) -> None:
    """Create the SQLite schema when the sqlite backend is selected.

    This must run before anything touches the stores.
    """
    if settings.storage.backend != "sqlite":
        logger.debug("database_skipped", backend=settings.storage.backend)
        return

    from codegen_share.db import init_db

    await init_db(settings.storage.database_path)


async def shutdown_database(app: FastAPI) -> None:
    from codegen_share.db import dispose_db

    await dispose_db()


async def start_maintenance_scheduler(app: FastAPI, settings: Settings) -> None:
    await _container(app).scheduler.start()


async def stop_maintenance_scheduler(app: FastAPI) -> None:
    await _container(app).scheduler.stop()


async def close_http_clients(app: FastAPI) -> None:
    """Close the outbound HTTP clients of the generator and the OAuth client."""
    container = _container(app)
    await container.generator.close()
    if container.oauth is not None:
        await container.oauth.close()
