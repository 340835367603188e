"""Typed interfaces for adapter-layer responsibilities."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

from .data_table import DataTable


@dataclass(frozen=True)
class QueryRecord:
    """One record returned by an org query.

    Attributes:
        fields: Field bag keyed by API field name.
        object_type: sObject type reported in record attributes.
    """

    fields: dict[str, Any]
    object_type: str | None = None


@dataclass(frozen=True)
class QueryResult:
    """Result contract for one query call.

    Attributes:
        total_size: Total number of matching records.
        done: Whether all records were returned in this page.
        records: Records of this page.
        next_records_url: Locator for the next page when `done` is false.
    """

    total_size: int
    done: bool
    records: tuple[QueryRecord, ...] = ()
    next_records_url: str | None = None


@dataclass(frozen=True)
class BulkJobHandle:
    """Reference to one submitted bulk ingest job.

    Attributes:
        job_id: Upstream job identifier.
        object_name: Target sObject.
        operation: Ingest operation kind.
    """

    job_id: str
    object_name: str = ""
    operation: str = ""


@dataclass(frozen=True)
class BulkJobStatus:
    """Latest status snapshot of one bulk ingest job.

    Attributes:
        state: Job state, e.g. `InProgress` or `JobComplete`.
        number_records_processed: Records processed so far.
        number_records_failed: Records rejected so far.
        error_message: Upstream job-level error message, if any.
    """

    state: str
    number_records_processed: int = 0
    number_records_failed: int = 0
    error_message: str | None = None


@dataclass(frozen=True)
class OrgIdentity:
    """Identity attributes of an authorized org session.

    Attributes:
        org_id: Organization identifier.
        username: Authenticated username.
        user_id: Authenticated user identifier.
        instance_url: REST API instance base URL.
        api_version: REST API version.
        org_type: Org type label reported by AppLink.
    """

    org_id: str
    username: str
    user_id: str = ""
    instance_url: str = ""
    api_version: str = ""
    org_type: str = field(default="")


class OrgSessionPort(Protocol):
    """Port definition for one authenticated org session."""

    @property
    def identity(self) -> OrgIdentity:
        """Return identity attributes of this session."""

    async def adapter_query(self, soql: str) -> QueryResult:
        """Execute one SOQL query.

        Args:
            soql: Query text, passed verbatim.

        Returns:
            QueryResult: First result page.

        Raises:
            SalesforceApiError: Raised on malformed query or access error.
            ConnectionError: Raised when the transport fails.
        """

    async def adapter_bulk_ingest(
        self,
        object_name: str,
        operation: str,
        data_table: DataTable,
    ) -> list[BulkJobHandle]:
        """Submit tabular rows as one or more bulk ingest jobs.

        Args:
            object_name: Target sObject.
            operation: Ingest operation, e.g. `insert`.
            data_table: Rows to ingest.

        Returns:
            list[BulkJobHandle]: One handle per submitted job.

        Raises:
            BulkIngestError: Raised on malformed batch, carrying handles of jobs
                submitted before the failure.
        """

    async def adapter_bulk_job_info(self, job_handle: BulkJobHandle) -> BulkJobStatus:
        """Return the current status snapshot of a bulk job.

        Raises:
            ConnectionError: Raised when the transport fails.
        """

    async def adapter_bulk_failed_results(self, job_handle: BulkJobHandle) -> list[dict[str, str]]:
        """Return failed-record detail rows of a completed bulk job.

        Raises:
            ConnectionError: Raised when the transport fails.
        """


class OrgAuthorizationPort(Protocol):
    """Port definition for resolving connection names to org sessions."""

    async def adapter_get_authorization(self, connection_name: str) -> OrgSessionPort:
        """Resolve one connection name to an authenticated org session.

        Args:
            connection_name: Configured connection name.

        Returns:
            OrgSessionPort: Authenticated session.

        Raises:
            AppLinkAuthorizationError: Raised for unknown or unauthorized names.
            ConnectionError: Raised when the transport fails.
        """
