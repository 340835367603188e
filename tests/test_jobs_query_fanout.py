"""Regression tests for multi-connection query fan-out behavior."""

from __future__ import annotations

import asyncio
import logging

import pytest

from app.adapters import AppLinkAuthorizationError, OrgIdentity, QueryRecord, QueryResult, SalesforceApiError
from app.domain import ConnectionQueryFailure, ConnectionQuerySuccess, QueryResultRow
from app.jobs import QueryFanOutError, QueryFanOutRunner, job_project_query_record


class _SessionStub:
    """Org session stub returning scripted query results."""

    def __init__(
        self,
        org_id: str,
        records: list[dict[str, object]] | None = None,
        query_error: Exception | None = None,
        query_delay_seconds: float = 0.0,
    ):
        """Initialize session stub state.

        Args:
            org_id: Org identifier.
            records: Field bags returned by queries.
            query_error: Optional error raised by queries.
            query_delay_seconds: Suspension before the query returns.
        """

        self.identity = OrgIdentity(org_id=org_id, username=f"user@{org_id}")
        self._records = records or []
        self._query_error = query_error
        self._query_delay_seconds = query_delay_seconds
        self.queries: list[str] = []

    async def adapter_query(self, soql: str) -> QueryResult:
        """Return scripted records or raise scripted error.

        Args:
            soql: Query text.

        Returns:
            QueryResult: Scripted query result.

        Raises:
            Exception: Scripted query error when configured.
        """

        self.queries.append(soql)
        if self._query_delay_seconds:
            await asyncio.sleep(self._query_delay_seconds)
        if self._query_error is not None:
            raise self._query_error
        records = tuple(QueryRecord(fields=dict(record)) for record in self._records)
        return QueryResult(total_size=len(records), done=True, records=records)


class _AuthorizationStub:
    """Authorization stub resolving names from a fixed table."""

    def __init__(self, sessions: dict[str, _SessionStub | Exception]):
        self._sessions = sessions
        self.requested_names: list[str] = []

    async def adapter_get_authorization(self, connection_name: str) -> _SessionStub:
        """Return configured session or raise configured error.

        Args:
            connection_name: Connection name.

        Returns:
            _SessionStub: Configured session.

        Raises:
            Exception: Configured authorization error or KeyError for unknown names.
        """

        self.requested_names.append(connection_name)
        session_or_error = self._sessions[connection_name]
        if isinstance(session_or_error, Exception):
            raise session_or_error
        return session_or_error


class _BarrierAuthorizationStub:
    """Authorization stub that only resolves once every connection has been requested."""

    def __init__(self, expected_calls: int):
        self._expected_calls = expected_calls
        self._calls = 0
        self._all_started = asyncio.Event()

    async def adapter_get_authorization(self, connection_name: str) -> _SessionStub:
        self._calls += 1
        if self._calls >= self._expected_calls:
            self._all_started.set()
        await self._all_started.wait()
        return _SessionStub(org_id=connection_name, records=[{"Name": connection_name, "Id": "001"}])


def test_jobs_query_fanout_isolates_failing_connection_scenario() -> None:
    """Keep successful org results when another org fails authorization.

    Returns:
        None: Assertions validate outcome payloads.

    Raises:
        AssertionError: Raised when isolation or payload shape is incorrect.
    """

    adapter = _AuthorizationStub(
        {
            "org-a": _SessionStub(org_id="00DA", records=[{"Name": "Acme", "Id": "001"}]),
            "org-b": AppLinkAuthorizationError("invalid_grant"),
        }
    )
    runner = QueryFanOutRunner(authorization_adapter=adapter, connection_names=("org-a", "org-b"))

    outcomes = asyncio.run(runner.job_run_query("SELECT Name, Id FROM Account"))

    assert [outcome.to_payload() for outcome in outcomes] == [
        {"connection_name": "org-a", "accounts": [{"Name": "Acme", "Id": "001"}]},
        {"connection_name": "org-b", "accounts": [], "error": "invalid_grant"},
    ]


def test_jobs_query_fanout_preserves_input_order_when_completions_are_reversed() -> None:
    """Return outcomes positionally even when later connections finish first."""

    adapter = _AuthorizationStub(
        {
            "slow": _SessionStub(org_id="slow", records=[{"Name": "Slow", "Id": "1"}], query_delay_seconds=0.05),
            "failing": _SessionStub(org_id="failing", query_error=SalesforceApiError("MALFORMED_QUERY")),
            "fast": _SessionStub(org_id="fast", records=[{"Name": "Fast", "Id": "2"}]),
        }
    )
    runner = QueryFanOutRunner(authorization_adapter=adapter, connection_names=("slow", "failing", "fast"))

    outcomes = asyncio.run(runner.job_run_query("SELECT Name, Id FROM Account"))

    assert [outcome.connection_name for outcome in outcomes] == ["slow", "failing", "fast"]
    assert isinstance(outcomes[0], ConnectionQuerySuccess)
    assert isinstance(outcomes[1], ConnectionQueryFailure)
    assert outcomes[1].error == "MALFORMED_QUERY"
    assert outcomes[1].accounts == ()
    assert outcomes[2].accounts == (QueryResultRow(name="Fast", record_id="2"),)


def test_jobs_query_fanout_runs_connections_concurrently() -> None:
    """Start every connection before any one of them completes.

    Returns:
        None: Assertions validate overlapping execution.

    Raises:
        AssertionError: Raised when connections are awaited one after another.
    """

    runner = QueryFanOutRunner(
        authorization_adapter=_BarrierAuthorizationStub(expected_calls=3),
        connection_names=("a", "b", "c"),
    )

    async def _run() -> list:
        return await asyncio.wait_for(runner.job_run_query("SELECT Name, Id FROM Account"), timeout=2.0)

    outcomes = asyncio.run(_run())

    assert [outcome.succeeded for outcome in outcomes] == [True, True, True]


def test_jobs_query_fanout_trims_names_and_keeps_duplicates() -> None:
    session = _SessionStub(org_id="00DA", records=[{"Name": "Acme", "Id": "001"}])
    adapter = _AuthorizationStub({"org-a": session})
    runner = QueryFanOutRunner(authorization_adapter=adapter)

    outcomes = asyncio.run(runner.job_run_query("SELECT Name, Id FROM Account", [" org-a", "org-a "]))

    assert adapter.requested_names == ["org-a", "org-a"]
    assert [outcome.connection_name for outcome in outcomes] == ["org-a", "org-a"]
    assert session.queries == ["SELECT Name, Id FROM Account", "SELECT Name, Id FROM Account"]


def test_jobs_query_fanout_returns_empty_list_without_connections() -> None:
    adapter = _AuthorizationStub({})
    runner = QueryFanOutRunner(authorization_adapter=adapter, connection_names=())

    assert asyncio.run(runner.job_run_query("SELECT Name, Id FROM Account")) == []
    assert adapter.requested_names == []


def test_jobs_query_fanout_projects_only_name_and_id() -> None:
    """Drop every field besides `Name` and `Id` during projection."""

    row = job_project_query_record(
        QueryRecord(fields={"Name": "Acme", "Id": "001", "BillingCity": "Austin", "Industry": "Energy"})
    )

    assert row == QueryResultRow(name="Acme", record_id="001")
    assert row.to_payload() == {"Name": "Acme", "Id": "001"}


def test_jobs_query_fanout_reports_malformed_record_as_connection_failure() -> None:
    adapter = _AuthorizationStub(
        {
            "org-a": _SessionStub(org_id="00DA", records=[{"Id": "001"}]),
            "org-b": _SessionStub(org_id="00DB", records=[{"Name": "Beta", "Id": "002"}]),
        }
    )
    runner = QueryFanOutRunner(authorization_adapter=adapter, connection_names=("org-a", "org-b"))

    outcomes = asyncio.run(runner.job_run_query("SELECT Name, Id FROM Account"))

    assert isinstance(outcomes[0], ConnectionQueryFailure)
    assert "Name" in outcomes[0].error
    assert outcomes[1].accounts == (QueryResultRow(name="Beta", record_id="002"),)


def test_jobs_query_fanout_uses_exception_type_when_message_is_empty() -> None:
    adapter = _AuthorizationStub({"org-a": RuntimeError()})
    runner = QueryFanOutRunner(authorization_adapter=adapter, connection_names=("org-a",))

    outcomes = asyncio.run(runner.job_run_query("SELECT Name, Id FROM Account"))

    assert outcomes[0].to_payload()["error"] == "RuntimeError"


def test_jobs_query_fanout_logs_connection_query_and_failure(caplog: pytest.LogCaptureFixture) -> None:
    """Emit connection, query and failure diagnostics.

    Args:
        caplog: Pytest log capture fixture.

    Returns:
        None: Assertions validate emitted log records.
    """

    adapter = _AuthorizationStub(
        {
            "org-a": _SessionStub(org_id="00DA", records=[{"Name": "Acme", "Id": "001"}]),
            "org-b": AppLinkAuthorizationError("invalid_grant"),
        }
    )
    runner = QueryFanOutRunner(authorization_adapter=adapter, connection_names=("org-a", "org-b"))
    caplog.set_level(logging.INFO, logger="app.jobs.query_fanout")

    asyncio.run(runner.job_run_query("SELECT Name, Id FROM Account"))

    messages = [record.getMessage() for record in caplog.records]
    assert any("org_id=00DA" in message and "username=user@00DA" in message for message in messages)
    assert any("total_size=1 done=True record_count=1" in message for message in messages)
    error_records = [record for record in caplog.records if record.levelno == logging.ERROR]
    assert len(error_records) == 1
    assert "org-b" in error_records[0].getMessage()


def test_jobs_query_fanout_raises_for_orchestration_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    """Surface failures outside per-connection handling as QueryFanOutError.

    Args:
        monkeypatch: Pytest monkeypatch fixture.
    """

    runner = QueryFanOutRunner(authorization_adapter=_AuthorizationStub({}), connection_names=("org-a",))

    async def _broken_gather(*awaitables, **_kwargs):
        for awaitable in awaitables:
            awaitable.close()
        raise RuntimeError("scheduler unavailable")

    monkeypatch.setattr("app.jobs.query_fanout.asyncio.gather", _broken_gather)

    with pytest.raises(QueryFanOutError, match="scheduler unavailable"):
        asyncio.run(runner.job_run_query("SELECT Name, Id FROM Account"))


def test_jobs_query_fanout_rejects_missing_adapter() -> None:
    with pytest.raises(ValueError, match="authorization_adapter"):
        QueryFanOutRunner(authorization_adapter=None)
