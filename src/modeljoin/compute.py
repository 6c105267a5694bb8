from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx

from .cache import ResponseCache
from .config import Settings, load_settings
from .errors import ModelJoinError
from .merge import MergedRow, match_summary, merge_models
from .records import BenchmarkModel, CapabilityProvider
from .sources.artificial_analysis import ArtificialAnalysisClient
from .sources.models_dev import ModelsDevClient

logger = logging.getLogger(__name__)


def build_clients(settings: Optional[Settings] = None) -> tuple[ArtificialAnalysisClient, ModelsDevClient]:
    settings = settings or load_settings()
    cache = ResponseCache(settings.cache_dir, ttl=settings.cache_ttl)
    return (
        ArtificialAnalysisClient(settings.aa_api_key, settings.aa_base_url, cache=cache),
        ModelsDevClient(settings.models_dev_url, cache=cache),
    )


def get_benchmarks(refresh: bool = False, settings: Optional[Settings] = None) -> List[BenchmarkModel]:
    aa, _ = build_clients(settings)
    return aa.get_models(refresh=refresh)


def get_providers(refresh: bool = False, settings: Optional[Settings] = None) -> Dict[str, CapabilityProvider]:
    """Capability catalog, or an empty mapping when it cannot be fetched.

    Losing the catalog degrades the merge to benchmark-only rows instead of failing.
    """
    _, md = build_clients(settings)
    try:
        return md.get_providers(refresh=refresh)
    except (ModelJoinError, httpx.HTTPError, ValueError) as e:
        logger.warning("models.dev unavailable (%s); continuing with benchmark data only", e)
        return {}


def merged_rows(refresh: bool = False) -> tuple[List[BenchmarkModel], Dict[str, CapabilityProvider], List[MergedRow]]:
    settings = load_settings()
    benchmarks = get_benchmarks(refresh=refresh, settings=settings)
    providers = get_providers(refresh=refresh, settings=settings)
    return benchmarks, providers, merge_models(benchmarks, providers)


def compute_models(refresh: bool = False, unmatched_only: bool = False) -> Dict[str, Any]:
    """Fetch both sources, merge them and return a JSON-ready payload."""
    _, providers, rows = merged_rows(refresh=refresh)
    selected = [r for r in rows if not r.matched] if unmatched_only else rows
    return {
        "timestamp": datetime.now().isoformat(),
        "catalog_available": bool(providers),
        "summary": match_summary(rows),
        "models": [r.to_dict() for r in selected],
    }


def compute_stats(refresh: bool = False) -> Dict[str, Any]:
    benchmarks, providers, rows = merged_rows(refresh=refresh)
    return {
        "benchmark_models": len(benchmarks),
        "catalog_providers": len(providers),
        "catalog_models": sum(len(p.models) for p in providers.values()),
        **match_summary(rows),
    }
