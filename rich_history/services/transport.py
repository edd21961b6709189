"""HTTP transport for the query history backend."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, Optional, Protocol

import aiohttp
from yarl import URL

from ..config import Settings
from .errors import RemoteError

LOGGER = logging.getLogger(__name__)


class BackendTransport(Protocol):
    """Async JSON transport. Paths are relative to the backend root."""

    async def get(self, url: str) -> Any:
        ...

    async def post(self, url: str, body: Any = None) -> Any:
        ...

    async def patch(self, url: str, body: Any = None) -> Any:
        ...

    async def delete(self, url: str) -> Any:
        ...


class AiohttpBackendTransport:
    """``BackendTransport`` built on aiohttp.

    A shared ``aiohttp.ClientSession`` may be passed in; otherwise a short
    lived session is opened for each request.
    """

    def __init__(
        self,
        base_url: str,
        *,
        api_token: Optional[str] = None,
        timeout_seconds: float = 12.0,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_token = api_token
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._session = session

    @classmethod
    def from_settings(cls, settings: Settings, session: Optional[aiohttp.ClientSession] = None) -> "AiohttpBackendTransport":
        return cls(
            settings.api_root,
            api_token=settings.api_token,
            timeout_seconds=settings.timeout_seconds,
            session=session,
        )

    async def get(self, url: str) -> Any:
        return await self._request("GET", url)

    async def post(self, url: str, body: Any = None) -> Any:
        return await self._request("POST", url, body)

    async def patch(self, url: str, body: Any = None) -> Any:
        return await self._request("PATCH", url, body)

    async def delete(self, url: str) -> Any:
        return await self._request("DELETE", url)

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"
        return headers

    async def _request(self, method: str, url: str, body: Any = None) -> Any:
        if self._session is not None:
            return await self._send(self._session, method, url, body)
        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            return await self._send(session, method, url, body)

    async def _send(self, session: aiohttp.ClientSession, method: str, url: str, body: Any) -> Any:
        full_url = f"{self.base_url}{url}"
        LOGGER.debug("%s %s", method, full_url)
        try:
            async with session.request(
                method,
                URL(full_url, encoded=True),
                json=body,
                headers=self._headers(),
                timeout=self.timeout,
            ) as resp:
                raw = await resp.read()
                status = resp.status
                if status < 200 or status >= 300:
                    raise RemoteError(
                        f"{method} {url} returned {status}: {raw[:200].decode('utf-8', errors='replace')}",
                        status=status,
                        url=url,
                    )
        except asyncio.CancelledError:
            raise
        except (asyncio.TimeoutError, aiohttp.ClientError) as exc:
            raise RemoteError(f"{method} {url} failed: {exc}", url=url) from exc

        if not raw:
            return None
        try:
            return json.loads(raw.decode("utf-8"))
        except ValueError as exc:
            # UnicodeDecodeError is a ValueError too
            raise RemoteError(f"{method} {url} returned invalid JSON", status=status, url=url) from exc
