from typing import Any, Dict, Optional, Protocol
from datetime import datetime, timezone
import logging

import httpx

logger = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, status: int, message: str) -> None:
        super().__init__(f"{status}: {message}")
        self.status = status
        self.message = message


class QuotifyPort(Protocol):
    async def save_quotation(self, data: Dict[str, Any]) -> Dict[str, Any]: ...

    async def log_conversation(
        self,
        *,
        speaker: str,
        text: str,
        session_id: str,
        room_name: str,
        timestamp: Optional[datetime] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]: ...

    async def get_quotation(self, quotation_id: str) -> Dict[str, Any]: ...


class ApiClient(QuotifyPort):
    """Thin async client for the Quotify backend, authenticated as one user."""

    def __init__(
        self,
        base_url: str,  # e.g. "http://localhost:8000"
        token: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    async def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self.transport
        ) as client:
            resp = await client.request(method, url, headers=self._headers(), **kwargs)

        try:
            data = resp.json()
        except ValueError:
            data = None

        if resp.status_code >= 400:
            message = None
            if isinstance(data, dict):
                message = data.get("message") or data.get("detail")
            message = str(message or (resp.text or "")[:300] or resp.reason_phrase)
            logger.warning("%s %s failed (status=%s): %s", method, path, resp.status_code, message)
            raise ApiError(resp.status_code, message)

        if not isinstance(data, dict):
            raise ApiError(resp.status_code, f"Backend returned non-JSON (status={resp.status_code})")
        return data

    async def save_quotation(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/quotations", json=data)

    async def log_conversation(
        self,
        *,
        speaker: str,
        text: str,
        session_id: str,
        room_name: str,
        timestamp: Optional[datetime] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "speaker": speaker,
            "text": text,
            "session_id": session_id,
            "room_name": room_name,
            "timestamp": (timestamp or datetime.now(timezone.utc)).isoformat(),
        }
        if metadata:
            payload["metadata"] = metadata
        return await self._request("POST", "/conversation-logs", json=payload)

    async def get_quotation(self, quotation_id: str) -> Dict[str, Any]:
        data = await self._request("GET", f"/quotations/{quotation_id}")
        return data.get("data") or {}
