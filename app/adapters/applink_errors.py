"""Project-native typed exceptions for AppLink and Salesforce API failures."""

from __future__ import annotations


class AppLinkAdapterError(Exception):
    """Base exception for adapter-level org access failures.

    Attributes:
        error_code: Optional upstream error code.
        status_code: Optional HTTP status code of the failed response.
    """

    def __init__(self, message: str, error_code: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.error_code = error_code
        self.status_code = status_code


class AppLinkConnectionError(AppLinkAdapterError, ConnectionError):
    """Transport-level connectivity failure during API communication."""


class AppLinkTimeoutError(AppLinkAdapterError, TimeoutError):
    """Transport timeout while waiting for an API response."""


class AppLinkAuthorizationError(AppLinkAdapterError, PermissionError):
    """Connection name could not be resolved to an authorized org."""


class SalesforceApiError(AppLinkAdapterError, RuntimeError):
    """Org REST API rejected a query or bulk request."""


class DataTableError(AppLinkAdapterError, ValueError):
    """Row content does not match the declared data table columns."""


class BulkIngestError(SalesforceApiError):
    """Bulk ingest submission stopped part way through.

    Attributes:
        submitted_job_handles: Jobs already closed for processing before the failure.
    """

    def __init__(
        self,
        message: str,
        submitted_job_handles: tuple = (),
        error_code: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message, error_code=error_code, status_code=status_code)
        self.submitted_job_handles = submitted_job_handles
