"""Regression tests for bulk job monitor polling and outcome reporting."""

from __future__ import annotations

import asyncio
import logging

import pytest

from app.adapters import BulkJobHandle, BulkJobStatus, OrgIdentity
from app.jobs import BulkJobMonitor, BulkJobMonitorRegistry, job_wait_for_stop

_MONITOR_LOGGER = "app.jobs.bulk_monitor"


class _ScriptedSession:
    """Session stub replaying a scripted sequence of status snapshots."""

    def __init__(
        self,
        statuses: list[BulkJobStatus | Exception],
        failed_results: list[dict[str, str]] | Exception | None = None,
    ):
        """Initialize scripted session.

        Args:
            statuses: Snapshots or errors returned by successive polls.
            failed_results: Failed rows, or an error raised when fetched.
        """

        self.identity = OrgIdentity(org_id="00DE", username="bulk@example.com")
        self._statuses = list(statuses)
        self._failed_results = failed_results if failed_results is not None else []
        self.poll_count = 0
        self.failed_results_calls = 0

    async def adapter_bulk_job_info(self, job_handle: BulkJobHandle) -> BulkJobStatus:
        _ = job_handle
        self.poll_count += 1
        next_status = self._statuses.pop(0) if len(self._statuses) > 1 else self._statuses[0]
        if isinstance(next_status, Exception):
            raise next_status
        return next_status

    async def adapter_bulk_failed_results(self, job_handle: BulkJobHandle) -> list[dict[str, str]]:
        _ = job_handle
        self.failed_results_calls += 1
        if isinstance(self._failed_results, Exception):
            raise self._failed_results
        return self._failed_results


class _RecordingWait:
    """Wait provider that records requested delays without sleeping."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, stop_event: asyncio.Event, timeout_seconds: float) -> bool:
        self.delays.append(timeout_seconds)
        await asyncio.sleep(0)
        return stop_event.is_set()


_JOB = BulkJobHandle(job_id="750JOB", object_name="Account", operation="insert")


def _messages(caplog: pytest.LogCaptureFixture, level: int | None = None) -> list[str]:
    return [
        record.getMessage()
        for record in caplog.records
        if record.name == _MONITOR_LOGGER and (level is None or record.levelno == level)
    ]


def test_jobs_bulk_monitor_stops_after_complete_snapshot(caplog: pytest.LogCaptureFixture) -> None:
    """Log one success and stop polling on a clean `JobComplete` snapshot.

    Args:
        caplog: Pytest log capture fixture.

    Returns:
        None: Assertions validate poll count and log output.

    Raises:
        AssertionError: Raised when the monitor keeps polling or logs wrongly.
    """

    session = _ScriptedSession([BulkJobStatus(state="JobComplete", number_records_processed=1000)])
    wait = _RecordingWait()
    caplog.set_level(logging.INFO, logger=_MONITOR_LOGGER)

    asyncio.run(BulkJobMonitor(wait_provider=wait).monitor_run(session, _JOB))

    assert session.poll_count == 1
    assert wait.delays == []
    assert session.failed_results_calls == 0
    success_messages = [message for message in _messages(caplog) if "completed successfully" in message]
    assert success_messages == ["Job 750JOB completed successfully. Processed 1000 records"]


def test_jobs_bulk_monitor_logs_failed_records_once_for_partial_success(caplog: pytest.LogCaptureFixture) -> None:
    """Fetch and log failed-record detail once when some rows were rejected."""

    failed_rows = [{"sf__Id": "", "sf__Error": "DUPLICATES_DETECTED:Use one of these records?", "Name": "Bulk Account X"}]
    session = _ScriptedSession(
        [BulkJobStatus(state="JobComplete", number_records_processed=1000, number_records_failed=1)],
        failed_results=failed_rows,
    )
    caplog.set_level(logging.INFO, logger=_MONITOR_LOGGER)

    asyncio.run(BulkJobMonitor(wait_provider=_RecordingWait()).monitor_run(session, _JOB))

    assert session.poll_count == 1
    assert session.failed_results_calls == 1
    warning_messages = _messages(caplog, logging.WARNING)
    assert len(warning_messages) == 1
    assert "DUPLICATES_DETECTED" in warning_messages[0]
    assert not any("completed successfully" in message for message in _messages(caplog))
    assert _messages(caplog, logging.ERROR) == []


def test_jobs_bulk_monitor_waits_between_non_terminal_polls() -> None:
    """Poll three times with one suspension after each non-terminal snapshot.

    Returns:
        None: Assertions validate poll and wait counts.

    Raises:
        AssertionError: Raised when the monitor busy-loops or over-polls.
    """

    session = _ScriptedSession(
        [
            BulkJobStatus(state="UploadComplete"),
            BulkJobStatus(state="InProgress", number_records_processed=400),
            BulkJobStatus(state="JobComplete", number_records_processed=1000),
        ]
    )
    wait = _RecordingWait()

    asyncio.run(BulkJobMonitor(poll_interval_seconds=5.0, wait_provider=wait).monitor_run(session, _JOB))

    assert session.poll_count == 3
    assert wait.delays == [5.0, 5.0]


@pytest.mark.parametrize("terminal_state", ["Failed", "Aborted"])
def test_jobs_bulk_monitor_logs_error_for_failed_or_aborted_job(
    terminal_state: str,
    caplog: pytest.LogCaptureFixture,
) -> None:
    session = _ScriptedSession([BulkJobStatus(state=terminal_state, number_records_failed=3)])
    caplog.set_level(logging.INFO, logger=_MONITOR_LOGGER)

    asyncio.run(BulkJobMonitor(wait_provider=_RecordingWait()).monitor_run(session, _JOB))

    assert session.failed_results_calls == 0
    assert _messages(caplog, logging.ERROR) == [f"Job 750JOB ended in state: {terminal_state}"]


def test_jobs_bulk_monitor_stops_without_retry_on_poll_error(caplog: pytest.LogCaptureFixture) -> None:
    """Log poll errors and end the monitor without raising."""

    session = _ScriptedSession([ConnectionError("connection reset")])
    wait = _RecordingWait()
    caplog.set_level(logging.INFO, logger=_MONITOR_LOGGER)

    asyncio.run(BulkJobMonitor(wait_provider=wait).monitor_run(session, _JOB))

    assert session.poll_count == 1
    assert wait.delays == []
    error_records = [record for record in caplog.records if record.levelno == logging.ERROR]
    assert len(error_records) == 1
    assert error_records[0].getMessage() == "Error monitoring bulk job 750JOB"
    assert error_records[0].exc_info is not None


def test_jobs_bulk_monitor_logs_failed_results_fetch_error(caplog: pytest.LogCaptureFixture) -> None:
    session = _ScriptedSession(
        [BulkJobStatus(state="JobComplete", number_records_processed=10, number_records_failed=2)],
        failed_results=TimeoutError("failed results timed out"),
    )
    caplog.set_level(logging.INFO, logger=_MONITOR_LOGGER)

    asyncio.run(BulkJobMonitor(wait_provider=_RecordingWait()).monitor_run(session, _JOB))

    assert session.failed_results_calls == 1
    assert _messages(caplog, logging.ERROR) == ["Error monitoring bulk job 750JOB"]


def test_jobs_bulk_monitor_stops_when_stop_event_is_set(caplog: pytest.LogCaptureFixture) -> None:
    """End the loop at the next suspension point once stop is signalled."""

    session = _ScriptedSession([BulkJobStatus(state="InProgress")])
    caplog.set_level(logging.INFO, logger=_MONITOR_LOGGER)

    async def _run() -> None:
        stop_event = asyncio.Event()
        stop_event.set()
        await BulkJobMonitor(poll_interval_seconds=30.0).monitor_run(session, _JOB, stop_event=stop_event)

    asyncio.run(asyncio.wait_for(_run(), timeout=2.0))

    assert session.poll_count == 1
    assert any("stopped in state InProgress" in message for message in _messages(caplog))


def test_jobs_bulk_monitor_honours_optional_max_wait(caplog: pytest.LogCaptureFixture) -> None:
    clock_values = iter([0.0, 2.0, 6.0])
    session = _ScriptedSession([BulkJobStatus(state="InProgress")])
    wait = _RecordingWait()
    caplog.set_level(logging.INFO, logger=_MONITOR_LOGGER)

    monitor = BulkJobMonitor(
        poll_interval_seconds=5.0,
        max_wait_seconds=5.0,
        wait_provider=wait,
        clock=lambda: next(clock_values),
    )
    asyncio.run(monitor.monitor_run(session, _JOB))

    assert session.poll_count == 2
    assert wait.delays == [5.0]
    assert len(_messages(caplog, logging.WARNING)) == 1


def test_jobs_bulk_monitor_rejects_invalid_timing() -> None:
    with pytest.raises(ValueError, match="poll_interval_seconds"):
        BulkJobMonitor(poll_interval_seconds=0)
    with pytest.raises(ValueError, match="max_wait_seconds"):
        BulkJobMonitor(max_wait_seconds=0)


def test_jobs_wait_for_stop_reports_timeout_and_stop_signal() -> None:
    async def _run() -> tuple[bool, bool]:
        stop_event = asyncio.Event()
        timed_out = await job_wait_for_stop(stop_event, 0.01)
        stop_event.set()
        stopped = await job_wait_for_stop(stop_event, 10.0)
        return timed_out, stopped

    assert asyncio.run(_run()) == (False, True)


def test_jobs_monitor_registry_runs_detached_and_stops_on_shutdown() -> None:
    """Run monitors as background tasks and stop them deterministically.

    Returns:
        None: Assertions validate registry bookkeeping.

    Raises:
        AssertionError: Raised when tasks are awaited inline or leak past shutdown.
    """

    session = _ScriptedSession([BulkJobStatus(state="InProgress")])
    registry = BulkJobMonitorRegistry(monitor=BulkJobMonitor(poll_interval_seconds=30.0))

    async def _run() -> tuple[int, int, int, int]:
        task = registry.registry_start(session, _JOB)
        polls_before_yield = session.poll_count
        await asyncio.sleep(0.01)
        active_while_running = registry.registry_active_count()
        await registry.registry_shutdown()
        await asyncio.sleep(0)
        assert task.done()
        return polls_before_yield, active_while_running, registry.registry_active_count(), session.poll_count

    polls_before_yield, active_while_running, active_after_shutdown, total_polls = asyncio.run(
        asyncio.wait_for(_run(), timeout=2.0)
    )

    assert polls_before_yield == 0
    assert active_while_running == 1
    assert active_after_shutdown == 0
    assert total_polls == 1


def test_jobs_monitor_registry_wait_idle_returns_after_completion() -> None:
    session = _ScriptedSession([BulkJobStatus(state="JobComplete", number_records_processed=5)])
    registry = BulkJobMonitorRegistry(monitor=BulkJobMonitor(wait_provider=_RecordingWait()))

    async def _run() -> int:
        registry.registry_start(session, _JOB)
        await registry.registry_wait_idle()
        return registry.registry_active_count()

    assert asyncio.run(asyncio.wait_for(_run(), timeout=2.0)) == 0
    assert session.poll_count == 1
