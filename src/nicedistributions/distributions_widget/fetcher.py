"""Fetch and cache per-group distributions from the backend.

One ``POST /distributions`` is issued per cache key. Concurrent callers with
the same key await the same request; a new refresh token or any other change
of the context makes a new key and therefore a new request.
"""

from __future__ import annotations

import asyncio
from collections import OrderedDict
from typing import Any, Optional

import httpx

from nicedistributions.distributions_widget.errors import FetchFailure
from nicedistributions.distributions_widget.models import LIMIT, Distribution, DistributionContext
from nicedistributions.utils.logging import get_logger

logger = get_logger(__name__)

DISTRIBUTIONS_PATH = "/distributions"
DEFAULT_CACHE_MAX_ENTRIES = 64
DEFAULT_TIMEOUT_SEC = 30.0

CacheKey = tuple[Any, ...]


def build_payload(group: str, context: DistributionContext) -> dict[str, Any]:
    """Request body for ``POST /distributions``."""
    return {
        "group": group.lower(),
        "limit": LIMIT,
        "view": context.view,
        "dataset": context.dataset,
        "filters": context.filters,
    }


def parse_distributions(group: str, body: Any) -> tuple[Distribution, ...]:
    """Validate a decoded response and build Distribution records.

    Raises:
        FetchFailure: If the body is not ``{"distributions": [...]}`` or an
            entry cannot be parsed.
    """
    if not isinstance(body, dict) or not isinstance(body.get("distributions"), list):
        raise FetchFailure(group, "response has no 'distributions' list")
    try:
        return tuple(Distribution.from_dict(d) for d in body["distributions"])
    except (TypeError, ValueError, OverflowError) as e:
        logger.exception(f"malformed distribution in group '{group}'")
        raise FetchFailure(group, f"malformed distribution: {e}") from e


class DistributionFetcher:
    """Coalescing, caching client for the distributions endpoint.

    Args:
        client: httpx.AsyncClient to use. If None, one is created on first use
            from ``base_url`` and ``timeout`` and closed by ``aclose()``.
        base_url: Backend root URL for the owned client.
        timeout: Request timeout in seconds for the owned client.
        cache_max_entries: Least recently used entries beyond this are dropped.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        *,
        base_url: str = "",
        timeout: float = DEFAULT_TIMEOUT_SEC,
        cache_max_entries: int = DEFAULT_CACHE_MAX_ENTRIES,
    ) -> None:
        self._client = client
        self._owns_client = client is None
        self._base_url = base_url
        self._timeout = timeout
        self._cache_max_entries = max(1, int(cache_max_entries))

        self._cache: OrderedDict[CacheKey, tuple[Distribution, ...]] = OrderedDict()
        self._pending: dict[CacheKey, asyncio.Task[tuple[Distribution, ...]]] = {}
        self._uncacheable: set[asyncio.Task] = set()

    async def __aenter__(self) -> "DistributionFetcher":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self._base_url, timeout=self._timeout)
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def fetch_group(self, group: str, context: DistributionContext) -> list[Distribution]:
        """Return the distributions of ``group`` under ``context``.

        Raises:
            FetchFailure: The request failed or returned an unusable body.
                Nothing is cached and the next call for the key retries.
        """
        key = context.cache_key(group)

        cached = self._cache.get(key)
        if cached is not None:
            self._cache.move_to_end(key)
            logger.debug(f"cache hit for group '{group}'")
            return list(cached)

        task = self._pending.get(key)
        if task is None:
            logger.debug(f"cache miss for group '{group}', requesting")
            task = asyncio.ensure_future(self._request(group, context))
            self._pending[key] = task
            task.add_done_callback(lambda t, key=key: self._on_request_done(key, t))
        else:
            logger.debug(f"joining in-flight request for group '{group}'")

        # shield: one caller giving up must not cancel the request for the others
        return list(await asyncio.shield(task))

    def _on_request_done(self, key: CacheKey, task: asyncio.Task) -> None:
        if self._pending.get(key) is task:
            del self._pending[key]
        if task in self._uncacheable:
            # invalidated while in flight
            self._uncacheable.discard(task)
            return
        if task.cancelled() or task.exception() is not None:
            return
        self._cache[key] = task.result()
        self._cache.move_to_end(key)
        while len(self._cache) > self._cache_max_entries:
            self._cache.popitem(last=False)

    async def _request(self, group: str, context: DistributionContext) -> tuple[Distribution, ...]:
        payload = build_payload(group, context)
        try:
            response = await self._get_client().post(DISTRIBUTIONS_PATH, json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as e:
            logger.exception(f"distributions request for group '{group}' failed: {e}")
            raise FetchFailure(group, str(e)) from e
        except ValueError as e:
            logger.exception(f"distributions response for group '{group}' is not JSON: {e}")
            raise FetchFailure(group, f"invalid JSON: {e}") from e

        distributions = parse_distributions(group, body)
        logger.info(f"fetched {len(distributions)} distribution(s) for group '{group}'")
        return distributions

    def invalidate(self, group: Optional[str] = None) -> None:
        """Forget cached results, for one group or all.

        Requests already in flight keep serving callers that join them but
        their results are not cached.
        """
        name = group.lower() if group is not None else None
        for key in [k for k in self._cache if name is None or k[0] == name]:
            del self._cache[key]
        for key, task in self._pending.items():
            if name is None or key[0] == name:
                self._uncacheable.add(task)

    def is_cached(self, group: str, context: DistributionContext) -> bool:
        return context.cache_key(group) in self._cache
