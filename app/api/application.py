"""FastAPI application factory for the multi-org demo service.

This module defines API application composition and the shutdown lifecycle
that stops background bulk monitors.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, Sequence

from fastapi import FastAPI

from app.config import AppSettings
from app.jobs import BulkDemoPort, MonitorRegistryPort, QueryRunnerPort

from .routers import api_create_accounts_router, api_create_bulk_demo_router, api_create_health_router

logger = logging.getLogger(__name__)


def create_api_application(
    settings: AppSettings,
    query_runner: QueryRunnerPort,
    bulk_demo_service: BulkDemoPort,
    monitor_registry: MonitorRegistryPort,
    shutdown_hooks: Sequence[Callable[[], Awaitable[None]]] = (),
) -> FastAPI:
    """Create the FastAPI application instance for the service.

    Args:
        settings: Validated application settings used for runtime metadata.
        query_runner: Fan-out runner backing the accounts listing.
        bulk_demo_service: Bulk demo workflow backing `/bulk-demo`.
        monitor_registry: Registry of background bulk monitors.
        shutdown_hooks: Extra coroutines awaited after monitors stop.

    Returns:
        FastAPI: Framework application instance.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if monitor_registry is None:
        raise ValueError("monitor_registry must not be None")

    @asynccontextmanager
    async def api_lifespan(_application: FastAPI) -> AsyncIterator[None]:
        yield
        logger.info("Shutdown signal received: stopping background work")
        await monitor_registry.registry_shutdown()
        for shutdown_hook in shutdown_hooks:
            await shutdown_hook()

    application = FastAPI(title="AppLink Multi-Org Demo", lifespan=api_lifespan)

    application.include_router(
        api_create_health_router(settings=settings, query_runner=query_runner, monitor_registry=monitor_registry)
    )
    application.include_router(api_create_accounts_router(settings=settings, query_runner=query_runner))
    application.include_router(api_create_bulk_demo_router(bulk_demo_service=bulk_demo_service))

    return application
