from __future__ import annotations

import logging
from typing import Any, List, Optional

import httpx

from ..cache import ResponseCache
from ..errors import CacheError, MissingApiKeyError
from ..records import BenchmarkModel, parse_benchmarks
from ._http import build_client, fetch, quota_from_headers

logger = logging.getLogger(__name__)

LLM_MODELS = "/data/llms/models"


class ArtificialAnalysisClient:
    """Benchmark data client (``x-api-key`` auth), cache-first unless refreshing."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str,
        cache: Optional[ResponseCache] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.cache = cache
        self._transport = transport

    def fetch_raw(self, refresh: bool = False) -> Any:
        key = ResponseCache.key(LLM_MODELS)
        if self.cache is not None and not refresh:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        if not self.api_key:
            raise MissingApiKeyError()

        url = f"{self.base_url}{LLM_MODELS}"
        logger.info("Fetching benchmark models from %s", url)
        with build_client({"x-api-key": self.api_key}, self._transport) as client:
            response = fetch(client, url, "Artificial Analysis")
        data = response.json()

        if self.cache is not None:
            try:
                self.cache.set(key, data)
                quota = quota_from_headers(response.headers)
                if quota is not None:
                    self.cache.set_quota(quota)
            except CacheError as e:
                logger.warning("%s; continuing without caching", e)
        return data

    def get_models(self, refresh: bool = False) -> List[BenchmarkModel]:
        models = parse_benchmarks(self.fetch_raw(refresh=refresh))
        logger.debug("Parsed %d benchmark models", len(models))
        return models
