from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

import httpx

from ..cache import QuotaInfo
from ..errors import APIError, InvalidApiKeyError, RateLimitError, ServerError

DEFAULT_TIMEOUT = 30.0
CONNECT_TIMEOUT = 10.0
USER_AGENT = "modeljoin/0.1"


def build_client(
    headers: Optional[Dict[str, str]] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    return httpx.Client(
        headers={"User-Agent": USER_AGENT, **(headers or {})},
        timeout=httpx.Timeout(DEFAULT_TIMEOUT, connect=CONNECT_TIMEOUT),
        transport=transport,
    )


def quota_from_headers(headers: Mapping[str, str]) -> Optional[QuotaInfo]:
    """Read ``X-RateLimit-*`` headers; None unless both limit and remaining parse."""
    try:
        limit = int(headers["x-ratelimit-limit"])
        remaining = int(headers["x-ratelimit-remaining"])
    except (KeyError, ValueError):
        return None
    return QuotaInfo(
        limit=limit,
        remaining=remaining,
        reset=headers.get("x-ratelimit-reset") or "unknown",
        updated_at=datetime.now(timezone.utc),
    )


def raise_for_status(response: httpx.Response, source: str) -> None:
    if response.is_success:
        return
    body = response.text
    msg = f"{source}: {response.reason_phrase}"
    if response.status_code == 401:
        raise InvalidApiKeyError(response.status_code, msg, body)
    if response.status_code == 429:
        reset = response.headers.get("x-ratelimit-reset")
        raise RateLimitError(response.status_code, f"{msg} (reset: {reset or 'unknown'})", body)
    if response.status_code >= 500:
        raise ServerError(response.status_code, msg, body)
    raise APIError(response.status_code, msg, body)


def fetch(client: httpx.Client, url: str, source: str, params: Optional[Dict[str, str]] = None) -> httpx.Response:
    response = client.get(url, params=params)
    raise_for_status(response, source)
    return response


def get_json(client: httpx.Client, url: str, source: str, params: Optional[Dict[str, str]] = None) -> Any:
    return fetch(client, url, source, params).json()
