"""public_api.client module.

This module defines `PublicApiClient`, the asynchronous networking boundary
for every outbound request to the remote public API. Its focus is narrow:
build a parameterized GET URL, apply the revalidation window, issue the
request, and decode the JSON body. It never retries and never recovers;
each failure is raised as one of the typed errors from `deptsite.exceptions`
so that the page composition layer can decide what the viewer sees.

Examples
--------
>>> from deptsite.pipeline.public_api.client import PublicApiClient
>>> from deptsite.pipeline.public_api.config import PublicApiConfig
>>> async def main():
...     async with PublicApiClient(PublicApiConfig()) as client:
...         return await client.get("/projects/featured", {"limit": 3})
>>> # To actually run:
>>> # import asyncio; asyncio.run(main())

Notes
-----
- The cache stores the raw body text of 2xx responses keyed by full URL; a
  hit decodes a fresh copy so callers never share mutable results.
- Timeouts come from ``config.request_timeout`` through
  ``aiohttp.ClientTimeout``; there is no composition-level timeout.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Any, Callable, Mapping
from urllib.parse import urlencode

import aiohttp
from aiolimiter import AsyncLimiter

from deptsite.config import (
    ACCEPT_HEADER,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_REVALIDATE_SECONDS,
    DEFAULT_TARGET_RPM,
)
from deptsite.exceptions import DecodeError, NetworkError, NotFoundError, TransportError

logger = logging.getLogger(__name__)

QueryValue = str | int | float | bool | None


def encode_query(query: Mapping[str, QueryValue] | None) -> str:
    """Encode query parameters, dropping every ``None`` value.

    Booleans are sent as ``true``/``false``. Parameter order follows the
    mapping's insertion order.

    Examples
    --------
    >>> encode_query({"limit": 12, "offset": None, "ordering": "-created_at"})
    'limit=12&ordering=-created_at'
    >>> encode_query({"is_featured": True})
    'is_featured=true'
    >>> encode_query(None)
    ''
    """
    if not query:
        return ""
    pairs: list[tuple[str, str]] = []
    for key, value in query.items():
        if value is None:
            continue
        if isinstance(value, bool):
            pairs.append((key, "true" if value else "false"))
        else:
            pairs.append((key, str(value)))
    return urlencode(pairs)


def build_url(
    base_url: str, path: str, query: Mapping[str, QueryValue] | None = None
) -> str:
    """Join base URL, path and encoded query; no ``?`` when the query is empty."""
    url = f"{base_url.rstrip('/')}/{path.lstrip('/')}"
    encoded = encode_query(query)
    return f"{url}?{encoded}" if encoded else url


class RevalidationCache:
    """Time-to-live store of response bodies keyed by request URL.

    Entries older than ``ttl_seconds`` are treated as stale. They are dropped
    on read, and every write purges all stale entries. A ``ttl_seconds`` of
    zero disables caching.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_REVALIDATE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = float(ttl_seconds)
        self._clock = clock
        self._entries: dict[str, tuple[float, str]] = {}

    def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, body = entry
        if self._clock() - stored_at >= self.ttl_seconds:
            self._entries.pop(key, None)
            return None
        return body

    def set(self, key: str, body: str) -> None:
        if self.ttl_seconds <= 0:
            return
        now = self._clock()
        self._purge(now)
        self._entries[key] = (now, body)

    def _purge(self, now: float) -> None:
        stale = [
            key
            for key, (stored_at, _) in self._entries.items()
            if now - stored_at >= self.ttl_seconds
        ]
        for key in stale:
            del self._entries[key]

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class PublicApiClient:
    r"""Asynchronous GET client for the remote public API.

    Attributes
    ----------
    config : Any
        Configuration object (normally `PublicApiConfig`) supplying
        ``base_url``, ``request_timeout``, ``revalidate_seconds`` and
        ``target_rpm``. Optional attributes are read with ``getattr``.
    cache : RevalidationCache
        The revalidation window shared by every request of this client.
    limiter : AsyncLimiter
        Request-rate limiter entered around each network call.

    Notes
    -----
    Use as an async context manager to let the client own its
    ``aiohttp.ClientSession``; alternatively inject a session, which is used
    and never closed by the client.

    See Also
    --------
    deptsite.pipeline.public_api.accessors : Typed resource accessors built on `get`.
    deptsite.exceptions : The errors raised by `get`.
    """

    def __init__(
        self,
        config: Any,
        session: aiohttp.ClientSession | None = None,
        *,
        cache: RevalidationCache | None = None,
        limiter: AsyncLimiter | None = None,
    ) -> None:
        self.config = config
        self.base_url: str = str(config.base_url).rstrip("/")
        self.cache = cache or RevalidationCache(
            getattr(config, "revalidate_seconds", DEFAULT_REVALIDATE_SECONDS)
        )
        self.limiter = limiter or AsyncLimiter(
            getattr(config, "target_rpm", DEFAULT_TARGET_RPM), 60
        )
        self._session = session
        self._owns_session = False

    async def __aenter__(self) -> PublicApiClient:
        self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _ensure_session(self) -> Any:
        if self._session is None:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the session if this client created it."""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None
            self._owns_session = False

    @staticmethod
    def _decode_text(raw: bytes, url: str) -> str:
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError(
                "Public API returned a response that is not valid UTF-8.",
                context={"url": url},
            ) from exc

    @staticmethod
    def _decode(body: str, url: str) -> Any:
        try:
            return json.loads(body)
        except json.JSONDecodeError as exc:
            raise DecodeError(
                "Public API returned a response that is not valid JSON.",
                context={"url": url},
            ) from exc

    async def get(
        self, path: str, query: Mapping[str, QueryValue] | None = None
    ) -> Any:
        r"""Fetch ``path`` with ``query`` and return the decoded JSON body.

        Parameters
        ----------
        path : str
            Resource path relative to the base URL (e.g. ``"/departments/cs"``).
        query : Mapping[str, QueryValue] or None, optional
            Query parameters; ``None`` values are not sent.

        Returns
        -------
        Any
            The decoded JSON value. Within the revalidation window an
            identical request is answered from the cache without a network
            call.

        Raises
        ------
        NotFoundError
            The server answered HTTP 404.
        TransportError
            The server answered any other non-2xx status.
        NetworkError
            The request failed before a response arrived (DNS, refused
            connection, timeout).
        DecodeError
            A 2xx body was not valid UTF-8 JSON.
        """
        url = build_url(self.base_url, path, query)
        cached = self.cache.get(url)
        if cached is not None:
            logger.debug("Revalidation cache hit for %s", url)
            return self._decode(cached, url)

        session = self._ensure_session()
        timeout = aiohttp.ClientTimeout(
            total=getattr(self.config, "request_timeout", DEFAULT_REQUEST_TIMEOUT)
        )
        logger.debug("GET %s", url)
        try:
            async with self.limiter:
                async with session.get(
                    url, headers={"Accept": ACCEPT_HEADER}, timeout=timeout
                ) as response:
                    status = response.status
                    if status == 404:
                        raise NotFoundError(context={"url": url})
                    if not 200 <= status < 300:
                        raise TransportError(status, context={"url": url})
                    raw = await response.read()
        except aiohttp.ClientError as exc:
            raise NetworkError(
                context={"url": url, "cause": type(exc).__name__}
            ) from exc
        except asyncio.TimeoutError as exc:
            raise NetworkError(
                "The public API did not respond in time.",
                context={"url": url, "cause": "TimeoutError"},
            ) from exc

        body = self._decode_text(raw, url)
        data = self._decode(body, url)
        self.cache.set(url, body)
        return data
