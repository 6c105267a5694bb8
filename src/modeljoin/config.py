from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import ConfigurationError

DEFAULT_AA_BASE_URL = "https://artificialanalysis.ai/api/v2"
DEFAULT_MODELS_DEV_URL = "https://models.dev/api.json"
DEFAULT_CACHE_TTL = 3600  # seconds
DEFAULT_API_CACHE_TTL = 120  # seconds
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 55480


def _env_int(name: str, default: int, minimum: int = 0) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"Invalid {name}={raw!r}. Must be an integer.")
    if value < minimum:
        raise ConfigurationError(f"Invalid {name}={raw!r}. Must be >= {minimum}.")
    return value


def default_cache_dir() -> Path:
    raw = os.environ.get("MODELJOIN_CACHE_DIR", "").strip()
    if raw:
        return Path(raw).expanduser()
    xdg = os.environ.get("XDG_CACHE_HOME", "").strip()
    base = Path(xdg).expanduser() if xdg else Path.home() / ".cache"
    return base / "modeljoin"


@dataclass(frozen=True)
class Settings:
    aa_api_key: Optional[str]
    aa_base_url: str
    models_dev_url: str
    cache_dir: Path
    cache_ttl: int
    api_cache_ttl: int
    host: str
    port: int
    log_level: str


def load_settings() -> Settings:
    """Read settings from ``MODELJOIN_*`` environment variables."""
    api_key = os.environ.get("MODELJOIN_AA_API_KEY") or os.environ.get("AA_API_KEY")
    return Settings(
        aa_api_key=api_key.strip() if api_key and api_key.strip() else None,
        aa_base_url=os.environ.get("MODELJOIN_AA_BASE_URL", DEFAULT_AA_BASE_URL).rstrip("/"),
        models_dev_url=os.environ.get("MODELJOIN_MODELS_DEV_URL", DEFAULT_MODELS_DEV_URL),
        cache_dir=default_cache_dir(),
        cache_ttl=_env_int("MODELJOIN_CACHE_TTL", DEFAULT_CACHE_TTL),
        api_cache_ttl=_env_int("MODELJOIN_API_CACHE_TTL", DEFAULT_API_CACHE_TTL),
        host=os.environ.get("MODELJOIN_HOST", DEFAULT_HOST),
        port=_env_int("MODELJOIN_PORT", DEFAULT_PORT, minimum=1),
        log_level=os.environ.get("MODELJOIN_LOG_LEVEL", "info"),
    )
