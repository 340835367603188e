"""Concurrent query fan-out across configured org connections."""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from app.adapters import OrgAuthorizationPort, QueryRecord
from app.domain import ConnectionQueryFailure, ConnectionQueryOutcome, ConnectionQuerySuccess, QueryResultRow

logger = logging.getLogger(__name__)

_PROJECTED_FIELDS = ("Name", "Id")


class QueryFanOutError(RuntimeError):
    """Raised when the fan-out itself fails outside per-connection handling."""


class QueryFanOutRunner:
    """Run one read query against every configured connection concurrently.

    Each connection yields exactly one outcome. Failures are captured as
    `ConnectionQueryFailure` values and never affect sibling connections;
    outcomes are returned in input order.
    """

    def __init__(
        self,
        authorization_adapter: OrgAuthorizationPort,
        connection_names: Sequence[str] = (),
    ):
        """Initialize fan-out runner dependencies.

        Args:
            authorization_adapter: Adapter resolving connection names to org sessions.
            connection_names: Default connection names, in presentation order.

        Raises:
            ValueError: Raised when authorization_adapter is None.
        """

        if authorization_adapter is None:
            raise ValueError("authorization_adapter must not be None")
        self._authorization_adapter = authorization_adapter
        self._connection_names = tuple(connection_names)

    @property
    def connection_names(self) -> tuple[str, ...]:
        return self._connection_names

    async def job_run_query(
        self,
        query_text: str,
        connection_names: Sequence[str] | None = None,
    ) -> list[ConnectionQueryOutcome]:
        """Query every connection and collect one outcome per name.

        Args:
            query_text: Query passed verbatim to each org.
            connection_names: Optional override of the configured names.

        Returns:
            list[ConnectionQueryOutcome]: Outcomes aligned with the input names.

        Raises:
            QueryFanOutError: Raised when the fan-out orchestration fails.
        """

        target_names = self._connection_names if connection_names is None else tuple(connection_names)
        if not target_names:
            return []

        try:
            outcomes = await asyncio.gather(
                *(self._job_query_connection(connection_name, query_text) for connection_name in target_names)
            )
        except Exception as error:
            logger.exception("Query fan-out failed")
            raise QueryFanOutError(str(error) or type(error).__name__) from error
        return list(outcomes)

    async def _job_query_connection(self, connection_name: str, query_text: str) -> ConnectionQueryOutcome:
        normalized_name = connection_name.strip()
        try:
            session = await self._authorization_adapter.adapter_get_authorization(normalized_name)
            logger.info(
                "Connected to org %s: org_id=%s username=%s",
                normalized_name,
                session.identity.org_id,
                session.identity.username,
            )

            query_result = await session.adapter_query(query_text)
            logger.info(
                "Query results for %s: total_size=%s done=%s record_count=%s",
                normalized_name,
                query_result.total_size,
                query_result.done,
                len(query_result.records),
            )
            accounts = tuple(job_project_query_record(record) for record in query_result.records)
        except Exception as error:
            message = str(error) or type(error).__name__
            logger.error("Error querying org %s: %s", normalized_name, message)
            return ConnectionQueryFailure(connection_name=normalized_name, error=message)
        return ConnectionQuerySuccess(connection_name=normalized_name, accounts=accounts)


def job_project_query_record(record: QueryRecord) -> QueryResultRow:
    """Project a query record onto its `Name` and `Id` fields.

    Args:
        record: Record returned by the org query.

    Returns:
        QueryResultRow: Row carrying only name and identifier.

    Raises:
        ValueError: Raised when the record lacks `Name` or `Id`.
    """

    fields = record.fields if isinstance(record.fields, dict) else {}
    missing_fields = [field_name for field_name in _PROJECTED_FIELDS if field_name not in fields]
    if missing_fields:
        raise ValueError(f"query record is missing field(s): {', '.join(missing_fields)}")
    return QueryResultRow(name=fields["Name"], record_id=fields["Id"])
