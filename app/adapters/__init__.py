"""Adapter layer package for org integration boundaries."""

from .applink_authorization import AppLinkAuthorizationAdapter
from .applink_errors import (
	AppLinkAdapterError,
	AppLinkAuthorizationError,
	AppLinkConnectionError,
	AppLinkTimeoutError,
	BulkIngestError,
	DataTableError,
	SalesforceApiError,
)
from .data_table import DataTable, DataTableBuilder
from .interfaces import (
	BulkJobHandle,
	BulkJobStatus,
	OrgAuthorizationPort,
	OrgIdentity,
	OrgSessionPort,
	QueryRecord,
	QueryResult,
)
from .salesforce_org import SalesforceOrgSession

__all__ = [
	"AppLinkAdapterError",
	"AppLinkAuthorizationAdapter",
	"AppLinkAuthorizationError",
	"AppLinkConnectionError",
	"AppLinkTimeoutError",
	"BulkIngestError",
	"BulkJobHandle",
	"BulkJobStatus",
	"DataTable",
	"DataTableBuilder",
	"DataTableError",
	"OrgAuthorizationPort",
	"OrgIdentity",
	"OrgSessionPort",
	"QueryRecord",
	"QueryResult",
	"SalesforceApiError",
	"SalesforceOrgSession",
]
