"""Health endpoint router composition for app and configuration checks."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from app.config import AppSettings
from app.jobs import MonitorRegistryPort, QueryRunnerPort


def api_create_health_router(
    settings: AppSettings,
    query_runner: QueryRunnerPort,
    monitor_registry: MonitorRegistryPort,
) -> APIRouter:
    """Create health-check router with connection and monitor status.

    Args:
        settings: Runtime settings used for environment metadata.
        query_runner: Runner exposing configured connection names.
        monitor_registry: Registry exposing running monitor count.

    Returns:
        APIRouter: Router exposing `/health` endpoint.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if query_runner is None:
        raise ValueError("query_runner must not be None")
    if monitor_registry is None:
        raise ValueError("monitor_registry must not be None")

    router = APIRouter(tags=["health"])

    @router.get("/health")
    def api_health_status() -> JSONResponse:
        """Return application health state.

        A service without configured connections answers but reports `degraded`.

        Returns:
            JSONResponse: Deterministic health payload for operational checks.
        """

        connection_count = len(query_runner.connection_names)
        payload = {
            "status": "ok" if connection_count else "degraded",
            "app": "up",
            "environment": settings.environment_name,
            "connections": connection_count,
            "active_bulk_monitors": monitor_registry.registry_active_count(),
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    return router
