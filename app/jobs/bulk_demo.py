"""Bulk ingest demo workflow: guard, submit, and hand off to a background monitor."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Final

from app.adapters import BulkIngestError, DataTable, DataTableBuilder, OrgAuthorizationPort
from app.domain import domain_generate_address, domain_generate_business_name

from .monitor_registry import BulkJobMonitorRegistry

logger = logging.getLogger(__name__)

BULK_DEMO_STATUS_STARTED: Final[str] = "started"
BULK_DEMO_STATUS_EXISTING_RECORDS: Final[str] = "existing_records"
BULK_DEMO_STATUS_CONNECTION_MISSING: Final[str] = "connection_missing"

BULK_DEMO_EXISTING_RECORDS_QUERY: Final[str] = "SELECT Id FROM Account WHERE Name LIKE 'Bulk Account%'"
BULK_DEMO_COLUMNS: Final[tuple[str, ...]] = (
    "Name",
    "BillingStreet",
    "BillingCity",
    "BillingState",
    "BillingPostalCode",
    "BillingCountry",
)


@dataclass(frozen=True)
class BulkDemoConfig:
    """Configuration values for the bulk demo.

    Attributes:
        connection_names: Configured connection names.
        demo_connection_name: Connection receiving the synthetic accounts.
        record_count: Number of accounts to submit.
    """

    connection_names: tuple[str, ...]
    demo_connection_name: str = "empty-org"
    record_count: int = 1000


@dataclass(frozen=True)
class BulkDemoResult:
    """Result contract of one bulk demo invocation.

    Attributes:
        status: One of `started`, `existing_records`, `connection_missing`.
        job_id: Identifier of the submitted job when started.
        existing_record_count: Number of earlier demo records when skipped.
        connection_name: Demo connection name.
    """

    status: str
    job_id: str | None = None
    existing_record_count: int = 0
    connection_name: str = ""


class BulkDemoService:
    """Submit synthetic accounts once and monitor the job in the background."""

    def __init__(
        self,
        authorization_adapter: OrgAuthorizationPort,
        monitor_registry: BulkJobMonitorRegistry,
        config: BulkDemoConfig,
        rng: random.Random | None = None,
    ):
        """Initialize bulk demo dependencies.

        Args:
            authorization_adapter: Adapter resolving connection names to org sessions.
            monitor_registry: Registry starting detached job monitors.
            config: Bulk demo configuration.
            rng: Optional random source for synthetic rows.

        Raises:
            ValueError: Raised when dependencies are invalid.
        """

        if authorization_adapter is None:
            raise ValueError("authorization_adapter must not be None")
        if monitor_registry is None:
            raise ValueError("monitor_registry must not be None")
        if config.record_count < 1:
            raise ValueError("config.record_count must be >= 1")

        self._authorization_adapter = authorization_adapter
        self._monitor_registry = monitor_registry
        self._config = config
        self._rng = rng or random.Random()

    async def bulk_demo_execute(self) -> BulkDemoResult:
        """Run the demo: skip when earlier records exist, otherwise submit and monitor.

        Returns:
            BulkDemoResult: Demo outcome; the monitor keeps running after return.

        Raises:
            AppLinkAdapterError: Raised when authorization, query or submission fails.
        """

        demo_connection_name = self._config.demo_connection_name.strip()
        configured_names = {name.strip() for name in self._config.connection_names}
        if demo_connection_name not in configured_names:
            return BulkDemoResult(status=BULK_DEMO_STATUS_CONNECTION_MISSING, connection_name=demo_connection_name)

        session = await self._authorization_adapter.adapter_get_authorization(demo_connection_name)
        logger.info(
            "Connected to %s: org_id=%s username=%s",
            demo_connection_name,
            session.identity.org_id,
            session.identity.username,
        )

        query_result = await session.adapter_query(BULK_DEMO_EXISTING_RECORDS_QUERY)
        logger.info(
            "Query results for %s: total_size=%s done=%s record_count=%s",
            demo_connection_name,
            query_result.total_size,
            query_result.done,
            len(query_result.records),
        )
        if query_result.records:
            return BulkDemoResult(
                status=BULK_DEMO_STATUS_EXISTING_RECORDS,
                existing_record_count=len(query_result.records),
                connection_name=demo_connection_name,
            )

        logger.info("Starting bulk ingest for %s", demo_connection_name)
        try:
            job_handles = await session.adapter_bulk_ingest(
                object_name="Account",
                operation="insert",
                data_table=self.bulk_demo_build_data_table(),
            )
        except BulkIngestError as error:
            for submitted_handle in error.submitted_job_handles:
                logger.warning("Monitoring job %s submitted before the ingest failure", submitted_handle.job_id)
                self._monitor_registry.registry_start(session, submitted_handle)
            raise
        if not job_handles:
            raise RuntimeError("bulk ingest returned no job handles")

        self._monitor_registry.registry_start(session, job_handles[0])
        return BulkDemoResult(
            status=BULK_DEMO_STATUS_STARTED,
            job_id=job_handles[0].job_id,
            connection_name=demo_connection_name,
        )

    def bulk_demo_build_data_table(self) -> DataTable:
        builder = DataTableBuilder(BULK_DEMO_COLUMNS)
        for _ in range(self._config.record_count):
            address = domain_generate_address(self._rng)
            builder.data_table_add_row(
                {
                    "Name": domain_generate_business_name(self._rng),
                    "BillingStreet": address.street,
                    "BillingCity": address.city,
                    "BillingState": address.state,
                    "BillingPostalCode": address.zip_code,
                    "BillingCountry": "United States",
                }
            )
        return builder.data_table_build()
