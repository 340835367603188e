"""Bulk demo router triggering a background-monitored ingest job."""

from __future__ import annotations

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from app.adapters import AppLinkAdapterError
from app.jobs import (
    BULK_DEMO_STATUS_CONNECTION_MISSING,
    BULK_DEMO_STATUS_EXISTING_RECORDS,
    BulkDemoPort,
)

logger = logging.getLogger(__name__)


def api_create_bulk_demo_router(bulk_demo_service: BulkDemoPort) -> APIRouter:
    """Create bulk demo router.

    Args:
        bulk_demo_service: Bulk demo workflow.

    Returns:
        APIRouter: Router exposing `/bulk-demo`.

    Raises:
        ValueError: Raised when bulk_demo_service is None.
    """

    if bulk_demo_service is None:
        raise ValueError("bulk_demo_service must not be None")

    router = APIRouter(tags=["bulk"])

    @router.get("/bulk-demo")
    async def api_bulk_demo_trigger() -> JSONResponse:
        """Submit the demo ingest job and return before its monitor completes.

        Returns:
            JSONResponse: Job id, existing-records notice, or error payload.
        """

        try:
            demo_result = await bulk_demo_service.bulk_demo_execute()
        except (AppLinkAdapterError, ValueError, RuntimeError) as error:
            logger.error("Error in bulk demo: %s", error)
            payload = {"status": "error", "message": str(error)}
            return JSONResponse(content=payload, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

        if demo_result.status == BULK_DEMO_STATUS_CONNECTION_MISSING:
            payload = {"status": "error", "message": f"{demo_result.connection_name} connection not found"}
            return JSONResponse(content=payload, status_code=status.HTTP_400_BAD_REQUEST)

        if demo_result.status == BULK_DEMO_STATUS_EXISTING_RECORDS:
            payload = {
                "message": f"Found {demo_result.existing_record_count} existing bulk-created records",
                "status": "EXISTING_RECORDS",
            }
            return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

        payload = {"message": "Bulk insert job started", "job_id": demo_result.job_id}
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    return router
