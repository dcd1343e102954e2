"""Resource locators used as argument values.

File and structured parameters can be given as a locator instead of inline
content:
- `file://` URIs and plain filesystem paths are read from disk in a worker
  thread;
- `http://` / `https://` URIs are downloaded with a short-lived client, so
  headers set on the shared API client never leak to third-party hosts.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from urllib.parse import urlsplit
from urllib.request import url2pathname

import httpx

from apiconsole.adapters.http_client import build_async_client
from apiconsole.core.config import AppSettings

_REMOTE_SCHEMES = ("http", "https")


def local_path_of(locator: str) -> Path | None:
    """Filesystem path behind `locator`, or None for remote locators."""

    parts = urlsplit(locator)
    scheme = parts.scheme.lower()
    if scheme in _REMOTE_SCHEMES:
        return None
    if scheme == "file":
        path = parts.path
        if parts.netloc and parts.netloc != "localhost":
            # file://C:/dir/file.txt
            path = f"{parts.netloc}{path}"
        return Path(url2pathname(path))
    if not scheme or len(scheme) == 1:
        # Relative/absolute paths, including Windows drive letters.
        return Path(locator)
    raise ValueError(f"Unsupported locator scheme '{parts.scheme}'")


class LocatorResourceFetcher:
    """`ResourceFetcher` for local files and HTTP(S) resources."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport

    async def fetch_bytes(self, locator: str) -> bytes:
        path = local_path_of(locator)
        if path is not None:
            return await asyncio.to_thread(path.read_bytes)
        response = await self._get(locator)
        return response.content

    async def fetch_text(self, locator: str) -> str:
        path = local_path_of(locator)
        if path is not None:
            return await asyncio.to_thread(path.read_text, encoding="utf-8-sig")
        response = await self._get(locator)
        return response.text

    async def _get(self, url: str) -> httpx.Response:
        async with build_async_client(self._settings, transport=self._transport) as client:
            response = await client.get(url)
        response.raise_for_status()
        return response
