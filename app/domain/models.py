"""Typed domain models shared across runtime layers.

This module provides the data contracts exchanged between the org adapters,
the query fan-out runner and the bulk job monitor.
"""

from dataclasses import dataclass, field
from typing import Final


BULK_JOB_STATE_COMPLETE: Final[str] = "JobComplete"
BULK_JOB_STATE_FAILED: Final[str] = "Failed"
BULK_JOB_STATE_ABORTED: Final[str] = "Aborted"
TERMINAL_BULK_JOB_STATES: Final[frozenset[str]] = frozenset(
    {BULK_JOB_STATE_COMPLETE, BULK_JOB_STATE_FAILED, BULK_JOB_STATE_ABORTED}
)


@dataclass(frozen=True)
class QueryResultRow:
    """Flat account row exposed to presentation.

    Attributes:
        name: Record display name (`Name` field).
        record_id: Record identifier (`Id` field).
    """

    name: str
    record_id: str

    def to_payload(self) -> dict[str, str]:
        """Return the row using Salesforce field names."""

        return {"Name": self.name, "Id": self.record_id}


@dataclass(frozen=True)
class ConnectionQuerySuccess:
    """Successful query outcome for one connection.

    Attributes:
        connection_name: Trimmed connection name.
        accounts: Projected rows in query order.
    """

    connection_name: str
    accounts: tuple[QueryResultRow, ...] = ()

    @property
    def succeeded(self) -> bool:
        return True

    def to_payload(self) -> dict[str, object]:
        return {
            "connection_name": self.connection_name,
            "accounts": [row.to_payload() for row in self.accounts],
        }


@dataclass(frozen=True)
class ConnectionQueryFailure:
    """Failed query outcome for one connection.

    Attributes:
        connection_name: Trimmed connection name.
        error: Non-empty error message.
        accounts: Always empty.
    """

    connection_name: str
    error: str
    accounts: tuple[QueryResultRow, ...] = field(default=())

    @property
    def succeeded(self) -> bool:
        return False

    def to_payload(self) -> dict[str, object]:
        return {
            "connection_name": self.connection_name,
            "accounts": [],
            "error": self.error,
        }


ConnectionQueryOutcome = ConnectionQuerySuccess | ConnectionQueryFailure


def domain_is_terminal_bulk_state(state: str) -> bool:
    """Return whether a bulk job state admits no further transition.

    Args:
        state: Bulk job state reported by the org.

    Returns:
        bool: True for `JobComplete`, `Failed` and `Aborted`.
    """

    return state in TERMINAL_BULK_JOB_STATES
