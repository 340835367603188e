"""Background monitoring of asynchronous bulk ingest jobs."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable

from app.adapters import BulkJobHandle, OrgSessionPort
from app.domain import BULK_JOB_STATE_COMPLETE, domain_is_terminal_bulk_state

logger = logging.getLogger(__name__)

WaitProvider = Callable[[asyncio.Event, float], Awaitable[bool]]


async def job_wait_for_stop(stop_event: asyncio.Event, timeout_seconds: float) -> bool:
    """Suspend until the stop event is set or the timeout elapses.

    Args:
        stop_event: Stop signal shared with the monitor owner.
        timeout_seconds: Maximum suspension time.

    Returns:
        bool: True when the stop event was set.
    """

    try:
        await asyncio.wait_for(stop_event.wait(), timeout=timeout_seconds)
    except asyncio.TimeoutError:
        return False
    return True


class BulkJobMonitor:
    """Poll one bulk job until it reaches a terminal state and log the outcome.

    Outcomes are reported only through logging. Poll or detail-fetch errors
    end the monitor; they are never retried.
    """

    def __init__(
        self,
        poll_interval_seconds: float = 5.0,
        max_wait_seconds: float | None = None,
        wait_provider: WaitProvider | None = None,
        clock: Callable[[], float] | None = None,
    ):
        """Initialize bulk job monitor.

        Args:
            poll_interval_seconds: Delay between status polls.
            max_wait_seconds: Optional overall bound; None polls until terminal state.
            wait_provider: Optional awaitable used for the delay between polls.
            clock: Optional monotonic clock used for the overall bound.

        Raises:
            ValueError: Raised when timing values are invalid.
        """

        if poll_interval_seconds <= 0:
            raise ValueError("poll_interval_seconds must be > 0")
        if max_wait_seconds is not None and max_wait_seconds <= 0:
            raise ValueError("max_wait_seconds must be > 0 when provided")

        self._poll_interval_seconds = poll_interval_seconds
        self._max_wait_seconds = max_wait_seconds
        self._wait_provider = wait_provider or job_wait_for_stop
        self._clock = clock or time.monotonic

    async def monitor_run(
        self,
        session: OrgSessionPort,
        job_handle: BulkJobHandle,
        stop_event: asyncio.Event | None = None,
    ) -> None:
        """Poll the job to completion and log its outcome.

        Args:
            session: Org session that submitted the job.
            job_handle: Handle of the submitted job.
            stop_event: Optional stop signal checked at every suspension point.

        Returns:
            None: Outcomes are logged only.
        """

        active_stop_event = stop_event or asyncio.Event()
        started_at = self._clock()
        job_id = job_handle.job_id

        try:
            while True:
                job_status = await session.adapter_bulk_job_info(job_handle)
                logger.info(
                    "Bulk job status: id=%s state=%s processed=%s failed=%s",
                    job_id,
                    job_status.state,
                    job_status.number_records_processed,
                    job_status.number_records_failed,
                )

                if domain_is_terminal_bulk_state(job_status.state):
                    break

                if self._max_wait_seconds is not None and self._clock() - started_at >= self._max_wait_seconds:
                    logger.warning(
                        "Stopped monitoring job %s after %.0f seconds in state %s",
                        job_id,
                        self._max_wait_seconds,
                        job_status.state,
                    )
                    return

                if await self._wait_provider(active_stop_event, self._poll_interval_seconds):
                    logger.info("Monitor for job %s stopped in state %s", job_id, job_status.state)
                    return

            if job_status.state != BULK_JOB_STATE_COMPLETE:
                logger.error("Job %s ended in state: %s", job_id, job_status.state)
                return

            if job_status.number_records_failed > 0:
                failed_results = await session.adapter_bulk_failed_results(job_handle)
                logger.warning(
                    "Job %s completed with %d failed records: %s",
                    job_id,
                    job_status.number_records_failed,
                    failed_results,
                )
                return

            logger.info(
                "Job %s completed successfully. Processed %d records",
                job_id,
                job_status.number_records_processed,
            )
        except Exception:
            logger.exception("Error monitoring bulk job %s", job_id)
