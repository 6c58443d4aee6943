"""Blocking "URL in, text out" fetch capability."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol, runtime_checkable
from urllib.parse import unquote, urlparse

import httpx

LOGGER = logging.getLogger(__name__)
HTTP_SCHEMES = frozenset({"http", "https"})
# Not Modified responses carry a usable (cached) body.
OK_STATUSES = frozenset({304})


class FetchError(RuntimeError):
    """Raised when the text at a URL cannot be retrieved."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Could not fetch {url}: {reason}")
        self.url = url
        self.reason = reason


@runtime_checkable
class Fetcher(Protocol):
    """Anything that can return the text stored at a URL."""

    def fetch_text(self, url: str) -> str:
        """Return the text at ``url`` or raise :class:`FetchError`."""


class UrlFetcher:
    """Fetch module source over HTTP(S) or from the local filesystem."""

    def __init__(
        self,
        *,
        base_dir: Path | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.base_dir = base_dir.expanduser() if base_dir else None
        self._client = client

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=None, follow_redirects=True)
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def fetch_text(self, url: str) -> str:
        try:
            scheme = urlparse(url).scheme.lower()
        except ValueError as exc:
            raise FetchError(url, f"malformed location ({exc})") from exc
        if scheme in HTTP_SCHEMES:
            return self._fetch_http(url)
        return self._read_file(url, scheme)

    def _fetch_http(self, url: str) -> str:
        LOGGER.debug("GET %s", url)
        try:
            response = self.client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise FetchError(url, str(exc) or type(exc).__name__) from exc
        if not (response.is_success or response.status_code in OK_STATUSES):
            raise FetchError(url, f"HTTP {response.status_code}")
        return response.text

    def _read_file(self, url: str, scheme: str) -> str:
        if scheme == "file":
            path = Path(unquote(urlparse(url).path))
        else:
            path = Path(url).expanduser()
            if not path.is_absolute() and self.base_dir is not None:
                path = self.base_dir / path
        LOGGER.debug("Reading %s", path)
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError, ValueError) as exc:
            raise FetchError(url, str(exc)) from exc


__all__ = ["FetchError", "Fetcher", "UrlFetcher"]
