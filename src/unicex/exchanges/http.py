"""HTTP fetch collaborator shared by the exchange adapters."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping

import aiohttp

from ..errors import TransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0
USER_AGENT = "unicex/0.1"


class ProxyConfig:
    """HTTP proxy configuration."""

    def __init__(self, url: str | None = None, username: str | None = None, password: str | None = None):
        self.url = url
        self.username = username
        self.password = password

    @property
    def proxy_url(self) -> str | None:
        if not self.url:
            return None
        if self.username and self.password:
            protocol = self.url.split("://")[0] if "://" in self.url else "http"
            rest = self.url.split("://")[1] if "://" in self.url else self.url
            return f"{protocol}://{self.username}:{self.password}@{rest}"
        return self.url


class HttpClient:
    """Thin aiohttp wrapper returning raw response bodies.

    Connection failures, timeouts and non-2xx statuses all surface as
    TransportError carrying the URL. Requests are never retried.
    """

    def __init__(self, *, timeout: float = DEFAULT_TIMEOUT, proxy: ProxyConfig | None = None):
        self.timeout = timeout
        self.proxy = proxy or ProxyConfig()
        self.session: aiohttp.ClientSession | None = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self.session is None:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers={"User-Agent": USER_AGENT},
            )
        return self.session

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        data: str | Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> bytes:
        """Issue a request and return the body of a 2xx response."""
        session = await self._ensure_session()
        logger.debug("%s %s", method, url)
        try:
            async with session.request(
                method,
                url,
                params=params,
                data=data,
                headers=headers,
                proxy=self.proxy.proxy_url,
            ) as resp:
                body = await resp.read()
                if not 200 <= resp.status < 300:
                    raise TransportError(f"{method} request failed", url=url, status=resp.status)
                return body
        except asyncio.TimeoutError as e:
            raise TransportError(f"{method} request timed out after {self.timeout}s", url=url) from e
        except aiohttp.ClientError as e:
            raise TransportError(f"{method} request failed: {e}", url=url) from e

    async def get(self, url: str, **kwargs: Any) -> bytes:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> bytes:
        return await self.request("POST", url, **kwargs)

    async def close(self) -> None:
        """Close the underlying session."""
        if self.session:
            await self.session.close()
            self.session = None
