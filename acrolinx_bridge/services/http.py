# acrolinx_bridge/services/http.py
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import httpx
import keyring
from keyring.errors import KeyringError

from acrolinx_bridge.core import config
from acrolinx_bridge.core.errors import ConfigurationError, TransportError

log = logging.getLogger("acrolinx.http")


class AcrolinxHttp:
    """
    Authenticated requests against one Acrolinx server.

    Every call carries the client signature and an auth token. The token is
    the explicit one when given, otherwise it is looked up in the system
    keyring with the request host as service and the signature as user.
    """

    def __init__(
        self,
        server_url: str,
        client_signature: str = config.CLIENT_SIGNATURE,
        api_token: Optional[str] = None,
        timeout: float = config.HTTP_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.server_url = (server_url or "").rstrip("/")
        self.client_signature = client_signature
        self.api_token = api_token
        self.timeout = timeout
        self._transport = transport

    def api_url(self, path: str) -> str:
        if not self.server_url:
            raise ConfigurationError("No Acrolinx server URL configured (set ACROLINX_URL)")
        return self.server_url + path

    async def resolve_token(self, url: str) -> str:
        if self.api_token:
            return self.api_token
        host = urlparse(url).hostname or ""
        try:
            token = await asyncio.to_thread(keyring.get_password, host, self.client_signature)
        except KeyringError as e:
            log.warning("Keyring lookup for host=%s failed: %s", host, e)
            return ""
        if not token:
            # the server will answer with an auth error
            log.warning("No Acrolinx token for host=%s in keyring", host)
            return ""
        return token

    async def headers_for(self, url: str, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {
            config.CLIENT_HEADER: self.client_signature,
            config.AUTH_HEADER: await self.resolve_token(url),
        }
        headers.update(extra or {})
        return headers

    async def request(
        self,
        url: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        body: Optional[Any] = None,
    ) -> httpx.Response:
        send_headers = await self.headers_for(url, headers)
        content = None
        if body is not None:
            content = body if isinstance(body, (bytes, str)) else json.dumps(body)
            send_headers.setdefault("Content-Type", "application/json; charset=utf-8")
        log.debug("%s %s", method, url)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                return await client.request(method, url, headers=send_headers, content=content)
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

    async def get(self, url: str, **kw) -> httpx.Response:
        return await self.request(url, "GET", **kw)

    async def post(self, url: str, body: Any, **kw) -> httpx.Response:
        return await self.request(url, "POST", body=body, **kw)

    async def delete(self, url: str, **kw) -> httpx.Response:
        return await self.request(url, "DELETE", **kw)
