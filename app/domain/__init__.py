"""Domain models used across application layer boundaries."""

from .models import (
    BULK_JOB_STATE_ABORTED,
    BULK_JOB_STATE_COMPLETE,
    BULK_JOB_STATE_FAILED,
    TERMINAL_BULK_JOB_STATES,
    ConnectionQueryFailure,
    ConnectionQueryOutcome,
    ConnectionQuerySuccess,
    QueryResultRow,
    domain_is_terminal_bulk_state,
)
from .sample_accounts import SampleAddress, domain_generate_address, domain_generate_business_name

__all__ = [
    "BULK_JOB_STATE_ABORTED",
    "BULK_JOB_STATE_COMPLETE",
    "BULK_JOB_STATE_FAILED",
    "TERMINAL_BULK_JOB_STATES",
    "ConnectionQueryFailure",
    "ConnectionQueryOutcome",
    "ConnectionQuerySuccess",
    "QueryResultRow",
    "SampleAddress",
    "domain_generate_address",
    "domain_generate_business_name",
    "domain_is_terminal_bulk_state",
]
