"""Typed interfaces for job-layer orchestration responsibilities."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, Sequence

from app.domain import ConnectionQueryOutcome

if TYPE_CHECKING:
    from .bulk_demo import BulkDemoResult


class QueryRunnerPort(Protocol):
    """Port definition for the multi-connection query runner."""

    @property
    def connection_names(self) -> tuple[str, ...]:
        """Return configured connection names."""

    async def job_run_query(
        self,
        query_text: str,
        connection_names: Sequence[str] | None = None,
    ) -> list[ConnectionQueryOutcome]:
        """Run one query against every connection.

        Args:
            query_text: Query passed verbatim to each org.
            connection_names: Optional override of configured names.

        Returns:
            list[ConnectionQueryOutcome]: One outcome per name, in input order.

        Raises:
            QueryFanOutError: Raised when the fan-out orchestration fails.
        """


class BulkDemoPort(Protocol):
    """Port definition for the bulk ingest demo workflow."""

    async def bulk_demo_execute(self) -> BulkDemoResult:
        """Run the bulk demo workflow once."""


class MonitorRegistryPort(Protocol):
    """Port definition for background monitor lifecycle."""

    def registry_active_count(self) -> int:
        """Return the number of running monitors."""

    async def registry_shutdown(self) -> None:
        """Stop every running monitor."""
