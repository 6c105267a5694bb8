from pathlib import Path

import httpx
import pytest
from conftest import AA_PAYLOAD, MODELS_DEV_PAYLOAD

from modeljoin.cache import ResponseCache
from modeljoin.errors import InvalidApiKeyError, MissingApiKeyError, RateLimitError, ServerError
from modeljoin.sources.artificial_analysis import ArtificialAnalysisClient
from modeljoin.sources._http import quota_from_headers
from modeljoin.sources.models_dev import ModelsDevClient

BASE = "https://aa.test/api/v2"


def _transport(status: int, payload=None, calls: list | None = None, headers=None) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        return httpx.Response(status, json=payload if payload is not None else {}, headers=headers)

    return httpx.MockTransport(handler)


def test_benchmark_client_sends_api_key_and_parses():
    calls: list = []
    client = ArtificialAnalysisClient("secret", BASE, transport=_transport(200, AA_PAYLOAD, calls))
    models = client.get_models()
    assert [m.slug for m in models][0] == "gpt-5-medium"
    assert str(calls[0].url) == f"{BASE}/data/llms/models"
    assert calls[0].headers["x-api-key"] == "secret"


def test_benchmark_client_requires_key_without_cache():
    client = ArtificialAnalysisClient(None, BASE, transport=_transport(200, AA_PAYLOAD))
    with pytest.raises(MissingApiKeyError):
        client.get_models()


def test_benchmark_client_uses_cache(tmp_path: Path):
    calls: list = []
    cache = ResponseCache(tmp_path, ttl=3600)
    client = ArtificialAnalysisClient("secret", BASE, cache=cache, transport=_transport(200, AA_PAYLOAD, calls))
    client.get_models()
    client.get_models()
    assert len(calls) == 1

    # A warm cache serves even without a key; refresh goes back to the network.
    assert len(ArtificialAnalysisClient(None, BASE, cache=cache).get_models()) == 3
    client.get_models(refresh=True)
    assert len(calls) == 2


@pytest.mark.parametrize(
    "status, error",
    [(401, InvalidApiKeyError), (429, RateLimitError), (503, ServerError)],
)
def test_benchmark_client_maps_http_errors(status, error):
    client = ArtificialAnalysisClient("secret", BASE, transport=_transport(status, {"error": "x"}))
    with pytest.raises(error) as excinfo:
        client.get_models()
    assert excinfo.value.status_code == status


def test_models_dev_client_parses_and_caches(tmp_path: Path):
    calls: list = []
    cache = ResponseCache(tmp_path, ttl=3600)
    transport = _transport(200, MODELS_DEV_PAYLOAD, calls)
    client = ModelsDevClient("https://models.test/api.json", cache=cache, transport=transport)
    providers = client.get_providers()
    assert sorted(providers) == ["google", "openai"]
    client.get_providers()
    assert len(calls) == 1


def test_unwritable_cache_still_returns_fetched_data(tmp_path: Path, caplog):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    cache = ResponseCache(blocker / "sub", ttl=3600)

    aa = ArtificialAnalysisClient("secret", BASE, cache=cache, transport=_transport(200, AA_PAYLOAD))
    assert len(aa.get_models()) == 3

    md = ModelsDevClient("https://models.test/api.json", cache=cache, transport=_transport(200, MODELS_DEV_PAYLOAD))
    assert sorted(md.get_providers()) == ["google", "openai"]
    assert "continuing without caching" in caplog.text


def test_benchmark_client_records_quota(tmp_path: Path):
    cache = ResponseCache(tmp_path, ttl=3600)
    headers = {"X-RateLimit-Limit": "1000", "X-RateLimit-Remaining": "42", "X-RateLimit-Reset": "2026-10-18T00:00:00Z"}
    transport = _transport(200, AA_PAYLOAD, headers=headers)
    client = ArtificialAnalysisClient("secret", BASE, cache=cache, transport=transport)
    client.get_models()

    quota = cache.get_quota()
    assert (quota.limit, quota.remaining, quota.reset) == (1000, 42, "2026-10-18T00:00:00Z")
    assert quota.is_low()


def test_quota_headers_are_optional():
    assert quota_from_headers(httpx.Headers({})) is None
    assert quota_from_headers(httpx.Headers({"X-RateLimit-Limit": "10", "X-RateLimit-Remaining": "n/a"})) is None
    quota = quota_from_headers(httpx.Headers({"X-RateLimit-Limit": "10", "X-RateLimit-Remaining": "9"}))
    assert quota.reset == "unknown"
    assert not quota.is_low()
