"""Firebase Cloud Messaging HTTP v1 client.

Access tokens come from a service-account JWT exchange done by google-auth.
The exchange is blocking (it uses ``requests``) so it runs in a thread.
"""
from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable

import httpx
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2 import service_account

from src.domain.errors import GatewayAuthError, GatewaySendError
from src.infrastructure.config import Settings

logger = logging.getLogger(__name__)

FCM_SCOPE = "https://www.googleapis.com/auth/firebase.messaging"
FCM_SEND_URL = "https://fcm.googleapis.com/v1/projects/{project_id}/messages:send"


@dataclass(frozen=True, slots=True)
class ServiceAccountKey:
    client_email: str
    private_key: str
    project_id: str
    raw: dict[str, Any]

    @classmethod
    def from_json(cls, raw: str) -> "ServiceAccountKey":
        data = json.loads(raw)
        # some secret stores hand back a JSON-encoded string
        if isinstance(data, str):
            data = json.loads(data)
        try:
            return cls(
                client_email=data["client_email"],
                private_key=data["private_key"],
                project_id=data["project_id"],
                raw=data,
            )
        except KeyError as exc:
            raise ValueError(f"Service account key is missing {exc.args[0]!r}") from exc


class GoogleAccessTokenProvider:
    """Hands out OAuth2 access tokens for the FCM scope.

    With ``reuse_token`` the token is kept until google-auth considers it
    expired (it refreshes a little before the real expiry). Without it every
    call performs a fresh exchange.
    """

    def __init__(
        self,
        credentials: Any | None,
        *,
        reuse_token: bool = True,
        request_factory: Callable[[], Any] = Request,
    ) -> None:
        self._credentials = credentials
        self.reuse_token = reuse_token
        self._request_factory = request_factory
        self._lock = asyncio.Lock()

    @classmethod
    def from_service_account(
        cls, key: ServiceAccountKey | None, *, reuse_token: bool = True
    ) -> "GoogleAccessTokenProvider":
        credentials = None
        if key is not None:
            credentials = service_account.Credentials.from_service_account_info(
                key.raw, scopes=[FCM_SCOPE]
            )
        return cls(credentials, reuse_token=reuse_token)

    def _refresh(self) -> None:
        try:
            self._credentials.refresh(self._request_factory())
        except GoogleAuthError as exc:
            raise GatewayAuthError(f"Access token exchange failed: {exc}") from exc

    async def get_token(self) -> str:
        if self._credentials is None:
            raise GatewayAuthError("Firebase service account key not found.")
        async with self._lock:
            if not (self.reuse_token and self._credentials.valid):
                await asyncio.to_thread(self._refresh)
            token = self._credentials.token
        if not token:
            raise GatewayAuthError("Failed to retrieve access token.")
        return token


class FcmClient:
    def __init__(
        self,
        project_id: str | None,
        token_provider: GoogleAccessTokenProvider,
        http: httpx.AsyncClient,
    ) -> None:
        self.project_id = project_id
        self._tokens = token_provider
        self._http = http

    @classmethod
    def from_settings(cls, settings: Settings, http: httpx.AsyncClient) -> "FcmClient":
        key = None
        if settings.firebase_service_account_key:
            key = ServiceAccountKey.from_json(settings.firebase_service_account_key)
        else:
            logger.warning("FIREBASE_SERVICE_ACCOUNT_KEY is not set; every push send will fail")
        provider = GoogleAccessTokenProvider.from_service_account(
            key, reuse_token=settings.fcm_reuse_access_token
        )
        return cls(key.project_id if key else None, provider, http)

    @property
    def send_url(self) -> str:
        return FCM_SEND_URL.format(project_id=self.project_id)

    async def send(self, message: dict[str, Any]) -> dict[str, Any]:
        """POST one message to FCM. Returns the decoded response (``{"name": ...}``)."""
        access_token = await self._tokens.get_token()
        try:
            resp = await self._http.post(
                self.send_url,
                json=message,
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {access_token}",
                },
            )
        except httpx.HTTPError as exc:
            raise GatewaySendError(f"Error communicating with FCM: {exc}") from exc

        if not resp.is_success:
            body = resp.text[:500]
            raise GatewaySendError(
                f"FCM send error: {resp.status_code} {body}",
                status_code=resp.status_code,
                body=body,
            )
        try:
            return resp.json()
        except ValueError:
            # delivered; FCM only documents a JSON body here
            logger.warning("FCM returned a non-JSON success body: %s", resp.text[:200])
            return {}
