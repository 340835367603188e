"""Salesforce REST and Bulk API 2.0 session bound to one authorized org."""

from __future__ import annotations

import csv
import io
import logging
from typing import Any, Final

import httpx

from .applink_errors import AppLinkAdapterError, AppLinkConnectionError, BulkIngestError, SalesforceApiError
from .data_table import DataTable
from .http_support import adapter_extract_error, adapter_send_request
from .interfaces import BulkJobHandle, BulkJobStatus, OrgIdentity, OrgSessionPort, QueryRecord, QueryResult

logger = logging.getLogger(__name__)


class SalesforceOrgSession(OrgSessionPort):
    """Org session issuing REST calls with the access token from AppLink."""

    # Bulk API 2.0 caps one job upload at 150 MB after base64 encoding.
    BULK_MAX_UPLOAD_BYTES: Final[int] = 100_000_000

    def __init__(
        self,
        identity: OrgIdentity,
        access_token: str,
        http_client: httpx.AsyncClient,
        max_upload_bytes: int = BULK_MAX_UPLOAD_BYTES,
    ):
        if not identity.instance_url:
            raise ValueError("identity.instance_url must not be blank")
        if not access_token.strip():
            raise ValueError("access_token must not be blank")
        if max_upload_bytes <= 0:
            raise ValueError("max_upload_bytes must be > 0")

        self._identity = identity
        self._access_token = access_token.strip()
        self._client = http_client
        self._max_upload_bytes = max_upload_bytes

    @property
    def identity(self) -> OrgIdentity:
        return self._identity

    async def adapter_query(self, soql: str) -> QueryResult:
        """Execute one SOQL query and return the first result page.

        Args:
            soql: Query text, passed verbatim.

        Returns:
            QueryResult: Parsed result page.

        Raises:
            SalesforceApiError: Raised when the org rejects the query.
            AppLinkConnectionError: Raised on transport failure or unreadable payload.
        """

        payload = await self._adapter_request_json("GET", "/query", params={"q": soql})
        raw_records = payload.get("records") or []
        records = tuple(self._adapter_parse_record(raw_record) for raw_record in raw_records)
        return QueryResult(
            total_size=int(payload.get("totalSize", len(records))),
            done=bool(payload.get("done", True)),
            records=records,
            next_records_url=payload.get("nextRecordsUrl"),
        )

    async def adapter_bulk_ingest(
        self,
        object_name: str,
        operation: str,
        data_table: DataTable,
    ) -> list[BulkJobHandle]:
        """Create, upload and close one ingest job per CSV chunk.

        Args:
            object_name: Target sObject.
            operation: Ingest operation, e.g. `insert`.
            data_table: Rows to ingest.

        Returns:
            list[BulkJobHandle]: Handles in chunk order.

        Raises:
            ValueError: Raised when inputs are blank or the table is empty.
            DataTableError: Raised when a row exceeds the upload size before any job is created.
            BulkIngestError: Raised when a job request fails; the failing job is aborted and
                jobs already closed for processing are attached as `submitted_job_handles`.
        """

        normalized_object_name = object_name.strip()
        normalized_operation = operation.strip()
        if not normalized_object_name:
            raise ValueError("object_name must not be blank")
        if not normalized_operation:
            raise ValueError("operation must not be blank")
        if not data_table.rows:
            raise ValueError("data_table must contain at least one row")

        csv_chunks = list(data_table.data_table_render_csv_chunks(self._max_upload_bytes))
        job_handles: list[BulkJobHandle] = []
        for csv_chunk in csv_chunks:
            try:
                job_id = await self._adapter_create_ingest_job(normalized_object_name, normalized_operation)
            except AppLinkAdapterError as error:
                raise BulkIngestError(
                    str(error),
                    submitted_job_handles=tuple(job_handles),
                    error_code=error.error_code,
                    status_code=error.status_code,
                ) from error

            try:
                await self._adapter_request(
                    "PUT",
                    f"/jobs/ingest/{job_id}/batches",
                    content=csv_chunk.encode("utf-8"),
                    headers={"Content-Type": "text/csv"},
                )
                await self._adapter_request_json("PATCH", f"/jobs/ingest/{job_id}", json={"state": "UploadComplete"})
            except AppLinkAdapterError as error:
                await self._adapter_abort_ingest_job(job_id)
                raise BulkIngestError(
                    str(error),
                    submitted_job_handles=tuple(job_handles),
                    error_code=error.error_code,
                    status_code=error.status_code,
                ) from error

            logger.info("Submitted bulk %s job %s for %s", normalized_operation, job_id, normalized_object_name)
            job_handles.append(
                BulkJobHandle(job_id=job_id, object_name=normalized_object_name, operation=normalized_operation)
            )
        return job_handles

    async def _adapter_create_ingest_job(self, object_name: str, operation: str) -> str:
        job_payload = await self._adapter_request_json(
            "POST",
            "/jobs/ingest",
            json={
                "object": object_name,
                "operation": operation,
                "contentType": "CSV",
                "columnDelimiter": "COMMA",
                "lineEnding": "LF",
            },
        )
        job_id = str(job_payload.get("id") or "")
        if not job_id:
            raise SalesforceApiError("bulk ingest job response missing id")
        return job_id

    async def _adapter_abort_ingest_job(self, job_id: str) -> None:
        try:
            await self._adapter_request_json("PATCH", f"/jobs/ingest/{job_id}", json={"state": "Aborted"})
        except AppLinkAdapterError as error:
            logger.warning("Could not abort bulk job %s: %s", job_id, error)
            return
        logger.info("Aborted bulk job %s after failed upload", job_id)

    async def adapter_bulk_job_info(self, job_handle: BulkJobHandle) -> BulkJobStatus:
        payload = await self._adapter_request_json("GET", f"/jobs/ingest/{job_handle.job_id}")
        return BulkJobStatus(
            state=str(payload.get("state") or ""),
            number_records_processed=int(payload.get("numberRecordsProcessed") or 0),
            number_records_failed=int(payload.get("numberRecordsFailed") or 0),
            error_message=payload.get("errorMessage"),
        )

    async def adapter_bulk_failed_results(self, job_handle: BulkJobHandle) -> list[dict[str, str]]:
        """Return failed rows with `sf__Id`, `sf__Error` and the submitted columns."""

        response = await self._adapter_request(
            "GET",
            f"/jobs/ingest/{job_handle.job_id}/failedResults/",
            headers={"Accept": "text/csv"},
        )
        return [dict(row) for row in csv.DictReader(io.StringIO(response.text))]

    def _adapter_api_url(self, path: str) -> str:
        return f"{self._identity.instance_url}/services/data/v{self._identity.api_version}{path}"

    async def _adapter_request(self, method: str, path: str, **request_options: Any) -> httpx.Response:
        headers = {"Authorization": f"Bearer {self._access_token}"}
        headers.update(request_options.pop("headers", {}))
        response = await adapter_send_request(
            self._client,
            method,
            self._adapter_api_url(path),
            headers=headers,
            **request_options,
        )
        if response.status_code >= 400:
            message, error_code = adapter_extract_error(response)
            raise SalesforceApiError(message, error_code=error_code, status_code=response.status_code)
        return response

    async def _adapter_request_json(self, method: str, path: str, **request_options: Any) -> dict[str, Any]:
        response = await self._adapter_request(method, path, **request_options)
        try:
            payload = response.json()
        except ValueError as error:
            raise AppLinkConnectionError(f"{method} {path} returned a non-JSON payload") from error
        if not isinstance(payload, dict):
            raise AppLinkConnectionError(f"{method} {path} returned an unexpected payload shape")
        return payload

    @staticmethod
    def _adapter_parse_record(raw_record: dict[str, Any]) -> QueryRecord:
        attributes = raw_record.get("attributes") or {}
        fields = {key: value for key, value in raw_record.items() if key != "attributes"}
        return QueryRecord(fields=fields, object_type=attributes.get("type"))
