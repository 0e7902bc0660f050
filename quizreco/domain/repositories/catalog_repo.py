# quizreco/domain/repositories/catalog_repo.py
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional, Protocol

import httpx
from redis.asyncio import Redis

from quizreco.utils.cache import cache_get, cache_key, cache_set

logger = logging.getLogger(__name__)

# One product document as returned by the catalog search API
RawRecord = Dict[str, Any]


class CatalogSearch(Protocol):
    """Anything that turns a text query into raw catalog records. Must not raise."""

    async def search(self, query: str) -> List[RawRecord]: ...


class VtexCatalogRepo:
    """
    VTEX public catalog search (`/api/catalog_system/pub/products/search`).

    Every failure (timeout, non-2xx, non-JSON, non-list body) is logged and
    turned into an empty result; the pipeline treats it as "no products".
    Responses are cached in Redis when a client is given.
    """

    SEARCH_PATH = "/api/catalog_system/pub/products/search/"
    ORDER_BY = "OrderByBestDiscountDESC"
    HEADERS = {
        "user-agent": "Mozilla/5.0",
        "accept": "application/json,text/plain,*/*",
    }

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        *,
        page_size: int = 100,
        timeout_s: float = 8.0,
        redis: Optional[Redis] = None,
        cache_ttl: int = 600,
        cache_prefix: str = "catalog",
    ):
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.page_size = page_size
        self.timeout_s = timeout_s
        self.redis = redis
        self.cache_ttl = cache_ttl
        self.cache_prefix = cache_prefix

    def _params(self, query: str) -> Dict[str, Any]:
        return {"ft": query, "O": self.ORDER_BY, "_from": 0, "_to": max(0, self.page_size - 1)}

    # ---------- Cache (best-effort) ----------
    async def _cached(self, key: str) -> Optional[List[RawRecord]]:
        if self.redis is None:
            return None
        try:
            return await cache_get(self.redis, key)
        except Exception as e:
            logger.warning(f"Catalog cache read failed key={key}: {e}")
            return None

    async def _store(self, key: str, records: List[RawRecord]) -> None:
        if self.redis is None:
            return
        try:
            await cache_set(self.redis, key, records, ex=self.cache_ttl)
        except Exception as e:
            logger.warning(f"Catalog cache write failed key={key}: {e}")

    # ---------- Search ----------
    async def search(self, query: str) -> List[RawRecord]:
        key = cache_key(self.cache_prefix, self.base_url, query, self.page_size)
        cached = await self._cached(key)
        if cached is not None:
            logger.debug(f"Catalog cache hit q={query!r} items={len(cached)}")
            return cached

        url = f"{self.base_url}{self.SEARCH_PATH}"
        try:
            r = await self.client.get(
                url,
                params=self._params(query),
                headers=self.HEADERS,
                timeout=self.timeout_s,
                follow_redirects=True,
            )
        except httpx.TimeoutException:
            logger.warning(f"Catalog search timed out q={query!r} after {self.timeout_s}s")
            return []
        except httpx.HTTPError as e:
            logger.error(f"Catalog search failed q={query!r}: {e}")
            return []

        if not r.is_success:
            logger.error(f"Catalog API status={r.status_code} q={query!r}")
            return []

        try:
            data = r.json()
        except ValueError:
            logger.error(f"Catalog API returned non-JSON body q={query!r}")
            return []
        if not isinstance(data, list):
            return []

        records = [d for d in data if isinstance(d, dict)]
        logger.debug(f"Catalog search q={query!r} returned {len(records)} records")
        await self._store(key, records)
        return records
