"""Detached bulk monitor tasks with deterministic shutdown."""

from __future__ import annotations

import asyncio
import logging

from app.adapters import BulkJobHandle, OrgSessionPort

from .bulk_monitor import BulkJobMonitor

logger = logging.getLogger(__name__)


class BulkJobMonitorRegistry:
    """Start bulk monitors as background tasks and stop them on shutdown."""

    def __init__(self, monitor: BulkJobMonitor, shutdown_timeout_seconds: float = 5.0):
        if monitor is None:
            raise ValueError("monitor must not be None")
        if shutdown_timeout_seconds <= 0:
            raise ValueError("shutdown_timeout_seconds must be > 0")
        self._monitor = monitor
        self._shutdown_timeout_seconds = shutdown_timeout_seconds
        self._tasks: dict[asyncio.Task[None], asyncio.Event] = {}

    def registry_active_count(self) -> int:
        return len(self._tasks)

    def registry_start(self, session: OrgSessionPort, job_handle: BulkJobHandle) -> asyncio.Task[None]:
        """Schedule one monitor without awaiting it.

        Must be called from a running event loop.

        Args:
            session: Org session that submitted the job.
            job_handle: Handle of the submitted job.

        Returns:
            asyncio.Task[None]: Scheduled monitor task.
        """

        stop_event = asyncio.Event()
        task = asyncio.create_task(
            self._monitor.monitor_run(session, job_handle, stop_event=stop_event),
            name=f"bulk-monitor-{job_handle.job_id}",
        )
        self._tasks[task] = stop_event
        task.add_done_callback(self._registry_forget)
        logger.info("Started monitor for bulk job %s", job_handle.job_id)
        return task

    async def registry_wait_idle(self) -> None:
        """Wait until every running monitor has finished on its own."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def registry_shutdown(self) -> None:
        """Signal every monitor to stop, then cancel those still running."""

        if not self._tasks:
            return

        pending_tasks = list(self._tasks)
        logger.info("Stopping %d bulk job monitor(s)", len(pending_tasks))
        for stop_event in self._tasks.values():
            stop_event.set()

        _, still_running = await asyncio.wait(pending_tasks, timeout=self._shutdown_timeout_seconds)
        for task in still_running:
            task.cancel()
        if still_running:
            await asyncio.gather(*still_running, return_exceptions=True)

    def _registry_forget(self, task: asyncio.Task[None]) -> None:
        self._tasks.pop(task, None)
