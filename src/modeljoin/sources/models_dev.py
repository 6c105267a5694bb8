from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from ..cache import ResponseCache
from ..errors import CacheError
from ..records import CapabilityProvider, parse_providers
from ._http import build_client, get_json

logger = logging.getLogger(__name__)

CACHE_ENDPOINT = "models-dev/api.json"


class ModelsDevClient:
    """Capability catalog client for the public models.dev ``api.json``."""

    def __init__(
        self,
        url: str,
        cache: Optional[ResponseCache] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.url = url
        self.cache = cache
        self._transport = transport

    def fetch_raw(self, refresh: bool = False) -> Any:
        key = ResponseCache.key(CACHE_ENDPOINT)
        if self.cache is not None and not refresh:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        logger.info("Fetching capability catalog from %s", self.url)
        with build_client(transport=self._transport) as client:
            data = get_json(client, self.url, "models.dev")

        if self.cache is not None:
            try:
                self.cache.set(key, data)
            except CacheError as e:
                logger.warning("%s; continuing without caching", e)
        return data

    def get_providers(self, refresh: bool = False) -> Dict[str, CapabilityProvider]:
        providers = parse_providers(self.fetch_raw(refresh=refresh))
        logger.debug(
            "Parsed %d providers / %d models", len(providers), sum(len(p.models) for p in providers.values())
        )
        return providers
