"""Accounts router listing records from every configured org."""

from __future__ import annotations

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from app.config import AppSettings
from app.jobs import QueryFanOutError, QueryRunnerPort


def api_create_accounts_router(settings: AppSettings, query_runner: QueryRunnerPort) -> APIRouter:
    """Create router exposing accounts grouped by connection.

    Args:
        settings: Runtime settings providing the accounts query.
        query_runner: Multi-connection query runner.

    Returns:
        APIRouter: Router exposing `/`.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if settings is None:
        raise ValueError("settings must not be None")
    if query_runner is None:
        raise ValueError("query_runner must not be None")

    router = APIRouter(tags=["accounts"])

    @router.get("/")
    async def api_accounts_by_org() -> JSONResponse:
        """Return one entry per configured connection, failed ones carrying `error`.

        Returns:
            JSONResponse: Accounts grouped by org, or 500 when the fan-out fails.
        """

        try:
            outcomes = await query_runner.job_run_query(settings.accounts_query)
        except QueryFanOutError as error:
            payload = {"status": "error", "message": str(error)}
            return JSONResponse(content=payload, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

        payload = {"accounts_by_org": [outcome.to_payload() for outcome in outcomes]}
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    return router
