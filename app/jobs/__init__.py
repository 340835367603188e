"""Job layer package for query fan-out and bulk job workflows."""

from .bulk_demo import (
	BULK_DEMO_COLUMNS,
	BULK_DEMO_EXISTING_RECORDS_QUERY,
	BULK_DEMO_STATUS_CONNECTION_MISSING,
	BULK_DEMO_STATUS_EXISTING_RECORDS,
	BULK_DEMO_STATUS_STARTED,
	BulkDemoConfig,
	BulkDemoResult,
	BulkDemoService,
)
from .bulk_monitor import BulkJobMonitor, job_wait_for_stop
from .interfaces import BulkDemoPort, MonitorRegistryPort, QueryRunnerPort
from .monitor_registry import BulkJobMonitorRegistry
from .query_fanout import QueryFanOutError, QueryFanOutRunner, job_project_query_record

__all__ = [
	"BULK_DEMO_COLUMNS",
	"BULK_DEMO_EXISTING_RECORDS_QUERY",
	"BULK_DEMO_STATUS_CONNECTION_MISSING",
	"BULK_DEMO_STATUS_EXISTING_RECORDS",
	"BULK_DEMO_STATUS_STARTED",
	"BulkDemoConfig",
	"BulkDemoPort",
	"BulkDemoResult",
	"BulkDemoService",
	"BulkJobMonitor",
	"BulkJobMonitorRegistry",
	"MonitorRegistryPort",
	"QueryFanOutError",
	"QueryFanOutRunner",
	"QueryRunnerPort",
	"job_project_query_record",
	"job_wait_for_stop",
]
