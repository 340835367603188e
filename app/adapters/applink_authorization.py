"""Heroku AppLink authorization adapter resolving connection names to org sessions."""

from __future__ import annotations

import logging
from typing import Any, Final
from urllib.parse import quote

import httpx

from .applink_errors import AppLinkAuthorizationError, AppLinkConnectionError
from .http_support import adapter_extract_error, adapter_send_request
from .interfaces import OrgAuthorizationPort, OrgIdentity
from .salesforce_org import SalesforceOrgSession

logger = logging.getLogger(__name__)


class AppLinkAuthorizationAdapter(OrgAuthorizationPort):
    """Adapter implementation for the AppLink `authorizations` endpoint.

    The adapter owns one `httpx.AsyncClient` shared by every session it
    creates; sessions themselves are not cached.
    """

    _USER_AGENT: Final[str] = "applink-multi-org-demo/1.0 (Python/httpx)"

    def __init__(
        self,
        api_url: str,
        token: str,
        app_id: str = "",
        default_api_version: str = "62.0",
        request_timeout_seconds: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize AppLink authorization adapter.

        Args:
            api_url: AppLink add-on API base URL.
            token: AppLink add-on bearer token.
            app_id: Heroku application UUID.
            default_api_version: API version used when AppLink omits one.
            request_timeout_seconds: HTTP timeout for the owned client.
            http_client: Optional externally managed client.

        Raises:
            ValueError: Raised when required config values are invalid.
        """

        normalized_api_url = api_url.strip()
        normalized_token = token.strip()
        if not normalized_api_url:
            raise ValueError("api_url must not be blank")
        if not normalized_token:
            raise ValueError("token must not be blank")
        if request_timeout_seconds <= 0:
            raise ValueError("request_timeout_seconds must be > 0")

        self._api_url = normalized_api_url.rstrip("/")
        self._token = normalized_token
        self._app_id = app_id.strip()
        self._default_api_version = default_api_version.strip() or "62.0"
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=request_timeout_seconds,
            headers={"User-Agent": self._USER_AGENT},
        )

    async def adapter_get_authorization(self, connection_name: str) -> SalesforceOrgSession:
        """Resolve one connection name through AppLink.

        Args:
            connection_name: Configured connection (developer) name.

        Returns:
            SalesforceOrgSession: Authenticated org session.

        Raises:
            AppLinkAuthorizationError: Raised when AppLink rejects the name.
            AppLinkConnectionError: Raised on transport failure or unreadable payload.
            AppLinkTimeoutError: Raised when the request times out.
        """

        normalized_name = connection_name.strip()
        if not normalized_name:
            raise AppLinkAuthorizationError("connection name must not be blank")

        headers = {"Authorization": f"Bearer {self._token}", "Accept": "application/json"}
        if self._app_id:
            headers["X-App-UUID"] = self._app_id
        response = await adapter_send_request(
            self._client,
            "GET",
            f"{self._api_url}/authorizations/{quote(normalized_name, safe='')}",
            headers=headers,
        )
        if response.status_code >= 400:
            message, error_code = adapter_extract_error(response)
            raise AppLinkAuthorizationError(message, error_code=error_code, status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as error:
            raise AppLinkConnectionError("AppLink authorization response is not valid JSON") from error
        if isinstance(payload, dict) and payload.get("title") and payload.get("detail"):
            raise AppLinkAuthorizationError(str(payload["detail"]), error_code=str(payload["title"]))

        identity, access_token = self._adapter_parse_authorization(payload, normalized_name)
        logger.debug("Resolved connection %s to org %s", normalized_name, identity.org_id)
        return SalesforceOrgSession(identity=identity, access_token=access_token, http_client=self._client)

    async def adapter_close(self) -> None:
        """Close the owned HTTP client; externally supplied clients are left open."""

        if self._owns_client:
            await self._client.aclose()

    def _adapter_parse_authorization(self, payload: Any, connection_name: str) -> tuple[OrgIdentity, str]:
        org_payload = payload.get("org") if isinstance(payload, dict) else None
        if not isinstance(org_payload, dict):
            raise AppLinkAuthorizationError(f"AppLink authorization for {connection_name} is missing org details")
        user_auth = org_payload.get("user_auth")
        if not isinstance(user_auth, dict):
            raise AppLinkAuthorizationError(f"AppLink authorization for {connection_name} is missing user_auth")

        access_token = str(user_auth.get("access_token") or "").strip()
        instance_url = str(org_payload.get("instance_url") or "").strip()
        if not access_token or not instance_url:
            raise AppLinkAuthorizationError(
                f"AppLink authorization for {connection_name} is missing access token or instance URL"
            )

        identity = OrgIdentity(
            org_id=str(org_payload.get("id") or ""),
            username=str(user_auth.get("username") or ""),
            user_id=str(user_auth.get("user_id") or ""),
            instance_url=instance_url.rstrip("/"),
            api_version=str(org_payload.get("api_version") or self._default_api_version),
            org_type=str(org_payload.get("type") or ""),
        )
        return identity, access_token
