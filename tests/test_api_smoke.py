from __future__ import annotations

from datetime import datetime, timezone

import pytest
from conftest import AA_PAYLOAD, MODELS_DEV_PAYLOAD, make_providers
from fastapi.testclient import TestClient

import modeljoin.api as api
import modeljoin.compute as compute
from modeljoin.cache import QuotaInfo, ResponseCache
from modeljoin.errors import MissingApiKeyError
from modeljoin.records import parse_benchmarks, parse_providers


@pytest.fixture
def client(monkeypatch, tmp_path):
    monkeypatch.setenv("MODELJOIN_CACHE_DIR", str(tmp_path))
    monkeypatch.setattr(api, "_cache", {})
    monkeypatch.setattr(compute, "get_benchmarks", lambda refresh=False, settings=None: parse_benchmarks(AA_PAYLOAD))
    monkeypatch.setattr(compute, "get_providers", lambda refresh=False, settings=None: parse_providers(MODELS_DEV_PAYLOAD))
    monkeypatch.setattr(api, "get_providers", lambda refresh=False, settings=None: parse_providers(MODELS_DEV_PAYLOAD))
    return TestClient(api.app)


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_models_endpoint(client):
    data = client.get("/api/models").json()
    assert data["summary"]["total"] == 3
    assert data["models"][0]["match_kind"] == "effort_level"
    assert data["models"][0]["context_window"] == 400000

    unmatched = client.get("/api/models", params={"unmatched": "true"}).json()
    assert [m["slug"] for m in unmatched["models"]] == ["mistral-medium"]


def test_match_endpoint(client):
    hit = client.get("/api/match", params={"slug": "gemini-2-5-flash-reasoning", "creator": "google"}).json()
    assert hit["matched"] is True
    assert hit["provider_id"] == "google"
    assert hit["model_id"] == "gemini-2.5-flash"
    assert hit["match_kind"] == "reasoning_variant"
    assert hit["model"]["reasoning"] is True

    miss = client.get("/api/match", params={"slug": "mistral-medium", "creator": "mistral"}).json()
    assert miss == {"slug": "mistral-medium", "creator": "mistral", "matched": False}


def test_stats_endpoint(client):
    stats = client.get("/api/stats").json()
    assert stats["benchmark_models"] == 3
    assert stats["catalog_providers"] == 2
    assert stats["matched"] == 2


def test_missing_api_key_is_503(client, monkeypatch):
    def no_key(refresh=False, settings=None):
        raise MissingApiKeyError()

    monkeypatch.setattr(compute, "get_benchmarks", no_key)
    response = client.get("/api/models", params={"refresh": "true"})
    assert response.status_code == 503
    assert "MODELJOIN_AA_API_KEY" in response.json()["detail"]


def test_match_refresh_rebuilds_catalog_index(client, monkeypatch):
    catalogs = [{"mistral": ["mistral-small"]}, {"mistral": ["mistral-medium"]}]
    monkeypatch.setattr(api, "get_providers", lambda refresh=False, settings=None: make_providers(catalogs.pop(0)))

    params = {"slug": "mistral-medium", "creator": "mistral"}
    assert client.get("/api/match", params=params).json()["matched"] is False
    assert client.get("/api/match", params=params).json()["matched"] is False
    hit = client.get("/api/match", params={**params, "refresh": "true"}).json()
    assert hit["matched"] is True
    assert hit["match_kind"] == "exact"


def test_quota_endpoint(client, tmp_path):
    assert client.get("/api/quota").json() == {"available": False}

    ResponseCache(tmp_path).set_quota(
        QuotaInfo(limit=100, remaining=5, reset="soon", updated_at=datetime.now(timezone.utc))
    )
    data = client.get("/api/quota").json()
    assert data["available"] is True
    assert data["used"] == 95
    assert data["percentage_remaining"] == 5.0
    assert data["low"] is True
