"""Shared httpx request helpers with project-native error mapping."""

from __future__ import annotations

from typing import Any

import httpx

from .applink_errors import AppLinkConnectionError, AppLinkTimeoutError


async def adapter_send_request(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    **request_options: Any,
) -> httpx.Response:
    """Send one HTTP request and translate transport failures.

    Args:
        client: Shared async HTTP client.
        method: HTTP method.
        url: Absolute request URL.
        **request_options: Extra `httpx` request options.

    Returns:
        httpx.Response: Upstream response of any status.

    Raises:
        AppLinkTimeoutError: Raised when the request times out.
        AppLinkConnectionError: Raised for other transport failures.
    """

    try:
        return await client.request(method, url, **request_options)
    except httpx.TimeoutException as error:
        raise AppLinkTimeoutError(f"{method} {url} timed out: {error}") from error
    except httpx.TransportError as error:
        raise AppLinkConnectionError(f"{method} {url} failed: {error}") from error


def adapter_extract_error(response: httpx.Response) -> tuple[str, str | None]:
    """Extract message and error code from an error response body.

    Understands Salesforce REST error lists (`[{"message", "errorCode"}]`),
    AppLink problem payloads (`{"title", "detail"}`) and OAuth error payloads
    (`{"error", "error_description"}`).

    Args:
        response: Failed upstream response.

    Returns:
        tuple[str, str | None]: Error message and optional error code.
    """

    fallback_message = f"HTTP {response.status_code}"
    try:
        payload = response.json()
    except ValueError:
        text = response.text.strip()
        return (text or fallback_message), None

    if isinstance(payload, list) and payload and isinstance(payload[0], dict):
        first_error = payload[0]
        return str(first_error.get("message") or fallback_message), first_error.get("errorCode")
    if isinstance(payload, dict):
        if payload.get("detail"):
            return str(payload["detail"]), payload.get("title") or payload.get("id")
        if payload.get("error"):
            message = payload.get("error_description") or payload["error"]
            return str(message), str(payload["error"])
        if payload.get("message"):
            return str(payload["message"]), payload.get("errorCode")
    return fallback_message, None
