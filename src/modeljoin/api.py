from __future__ import annotations

import os
from dataclasses import asdict
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from .cache import ResponseCache
from .compute import compute_models, compute_stats, get_providers
from .config import load_settings
from .errors import MissingApiKeyError
from .matcher import CandidateIndex, find_match

app = FastAPI(title="modeljoin")


cors_allow_origins = [o.strip() for o in os.environ.get("MODELJOIN_ALLOW_ORIGINS", "").split(",") if o.strip()]
cors_allow_origin_regex = os.environ.get("MODELJOIN_ALLOW_ORIGIN_REGEX", "").strip() or None
if not cors_allow_origins and cors_allow_origin_regex is None:
    cors_allow_origin_regex = r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$"

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allow_origins,
    allow_origin_regex=cors_allow_origin_regex,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


_cache: Dict[str, tuple[float, Any]] = {}


def get_cached_or_fetch(key: str, fetch_fn: Callable[[], Any], refresh: bool = False) -> Any:
    ttl = load_settings().api_cache_ttl
    now = datetime.now().timestamp()
    if not refresh and key in _cache:
        cached_time, cached_data = _cache[key]
        if now - cached_time < ttl:
            return cached_data
    data = fetch_fn()
    _cache[key] = (now, data)
    return data


def _call(key: str, fetch_fn: Callable[[], Any], refresh: bool = False) -> Any:
    try:
        return get_cached_or_fetch(key, fetch_fn, refresh=refresh)
    except MissingApiKeyError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/api/models")
def get_models(unmatched: bool = False, refresh: bool = False) -> Dict[str, Any]:
    return _call(
        f"models_{unmatched}",
        lambda: compute_models(refresh=refresh, unmatched_only=unmatched),
        refresh=refresh,
    )


@app.get("/api/match")
def get_match(slug: str, creator: Optional[str] = None, refresh: bool = False) -> Dict[str, Any]:
    """Resolve one benchmark slug against the capability catalog."""
    index = _call("catalog_index", lambda: CandidateIndex(get_providers(refresh=refresh)), refresh=refresh)
    result = find_match(creator, slug, index)
    if result is None:
        return {"slug": slug, "creator": creator, "matched": False}
    return {
        "slug": slug,
        "creator": creator,
        "matched": True,
        "provider_id": result.provider_id,
        "model_id": result.model.id,
        "match_kind": result.kind.value,
        "model": asdict(result.model),
    }


@app.get("/api/stats")
def get_stats(refresh: bool = False) -> Dict[str, Any]:
    return _call("stats", lambda: compute_stats(refresh=refresh), refresh=refresh)


@app.get("/api/quota")
def get_quota() -> Dict[str, Any]:
    settings = load_settings()
    quota = ResponseCache(settings.cache_dir, ttl=settings.cache_ttl).get_quota()
    if quota is None:
        return {"available": False}
    return {
        "available": True,
        "limit": quota.limit,
        "remaining": quota.remaining,
        "used": quota.used,
        "percentage_remaining": round(quota.percentage_remaining(), 1),
        "reset": quota.reset,
        "updated_at": quota.updated_at.isoformat(),
        "low": quota.is_low(),
    }


@app.get("/health")
def health_check():
    return {"status": "ok"}
