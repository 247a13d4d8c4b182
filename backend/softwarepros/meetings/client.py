"""
meetings/client.py

Thin async client for the Cloudflare RealtimeKit REST API.

Requests are signed with an HMAC-SHA256 bearer credential built from the
app id, a unix timestamp and the app secret.
"""

import base64
import hashlib
import hmac
import logging
import time
from datetime import datetime, timezone
from typing import Any

import httpx

from softwarepros.core.config import settings

logger = logging.getLogger(__name__)

USER_AGENT = "SoftwarePros-RealtimeKit/1.0"
PARTICIPANT_TOKEN_TTL_SECONDS = 3600


class RealtimeKitError(Exception):
    """Raised when the RealtimeKit API answers with a non-2xx status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"RealtimeKit API error: {status_code} - {message}")
        self.status_code = status_code
        self.message = message


class RealtimeKitNotConfigured(Exception):
    """Raised when the RealtimeKit credentials are missing."""


class RealtimeKitClient:
    def __init__(
        self,
        app_id: str,
        app_secret: str,
        api_url: str,
        org_id: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 15.0,
    ) -> None:
        self.app_id = app_id
        self.app_secret = app_secret
        self.api_url = api_url.rstrip("/")
        self.org_id = org_id or None
        self._transport = transport
        self._timeout = timeout

    def auth_header(self, timestamp: int | None = None) -> str:
        ts = int(time.time()) if timestamp is None else timestamp
        payload = f"{self.app_id}:{ts}"
        signature = hmac.new(
            self.app_secret.encode(), payload.encode(), hashlib.sha256
        ).hexdigest()
        token = base64.b64encode(f"{payload}:{signature}".encode()).decode()
        return f"Bearer {token}"

    def _headers(self) -> dict[str, str]:
        headers = {
            "Authorization": self.auth_header(),
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }
        if self.org_id:
            headers["X-Organization-ID"] = self.org_id
        return headers

    async def _request(self, method: str, endpoint: str, body: dict[str, Any] | None = None) -> Any:
        async with httpx.AsyncClient(
            base_url=self.api_url, transport=self._transport, timeout=self._timeout
        ) as client:
            response = await client.request(method, endpoint, headers=self._headers(), json=body)

        if response.is_error:
            logger.error(f"[MEETING] {method} {endpoint} failed: {response.status_code} {response.text}")
            raise RealtimeKitError(response.status_code, response.text)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            logger.error(f"[MEETING] {method} {endpoint} returned a non-JSON body")
            raise RealtimeKitError(response.status_code, "Invalid JSON in RealtimeKit response")

    async def create_meeting(
        self,
        name: str | None = None,
        description: str | None = None,
        max_participants: int = 10,
        auto_join: bool = True,
        recording: bool = False,
        metadata: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        body = {
            "name": name or f"Meeting {datetime.now(timezone.utc).isoformat()}",
            "description": description or "Video consultation meeting",
            "maxParticipants": max_participants,
            "autoJoin": auto_join,
            "recording": recording,
            "metadata": metadata or {},
        }
        return await self._request("POST", "/meetings", body)

    async def get_meeting(self, meeting_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/meetings/{meeting_id}")

    async def delete_meeting(self, meeting_id: str) -> None:
        await self._request("DELETE", f"/meetings/{meeting_id}")

    async def create_participant_token(
        self, meeting_id: str, participant_name: str, is_host: bool = False
    ) -> dict[str, Any]:
        body = {
            "meetingId": meeting_id,
            "participantName": participant_name,
            "role": "host" if is_host else "participant",
            "expiresIn": PARTICIPANT_TOKEN_TTL_SECONDS,
        }
        return await self._request("POST", f"/meetings/{meeting_id}/tokens", body)

    async def list_meetings(self) -> list[dict[str, Any]]:
        data = await self._request("GET", "/meetings")
        return list((data or {}).get("meetings", []))


def get_realtimekit_client() -> RealtimeKitClient:
    """Builds a client from settings; raises RealtimeKitNotConfigured when credentials are missing."""
    if not settings.realtimekit_configured:
        raise RealtimeKitNotConfigured(
            "Missing required RealtimeKit settings: REALTIMEKIT_APP_ID, REALTIMEKIT_APP_SECRET"
        )
    return RealtimeKitClient(
        app_id=settings.REALTIMEKIT_APP_ID,
        app_secret=settings.REALTIMEKIT_APP_SECRET,
        api_url=settings.REALTIMEKIT_API_URL,
        org_id=settings.REALTIMEKIT_ORG_ID,
    )
