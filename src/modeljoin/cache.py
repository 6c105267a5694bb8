from __future__ import annotations

import hashlib
import json
import logging
import os
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple

from .config import DEFAULT_CACHE_TTL
from .errors import CacheError

logger = logging.getLogger(__name__)

QUOTA_KEY = "quota"
LOW_QUOTA_FRACTION = 0.1


@dataclass(frozen=True)
class QuotaInfo:
    """API request quota as reported by the last successful benchmark fetch."""

    limit: int
    remaining: int
    reset: str
    updated_at: datetime

    @property
    def used(self) -> int:
        return self.limit - self.remaining

    def percentage_remaining(self) -> float:
        if self.limit <= 0:
            return 0.0
        return self.remaining / self.limit * 100.0

    def is_low(self) -> bool:
        return self.remaining < int(self.limit * LOW_QUOTA_FRACTION)


class ResponseCache:
    """File-backed cache of decoded API responses, one JSON file per key.

    Entries older than ``ttl`` seconds are reported as misses but left on disk;
    there is no eviction.
    """

    def __init__(self, base_dir: Path, ttl: int = DEFAULT_CACHE_TTL):
        self.base_dir = Path(base_dir)
        self.ttl = ttl

    @staticmethod
    def key(endpoint: str, params: Iterable[Tuple[str, str]] = ()) -> str:
        h = hashlib.sha256(endpoint.encode("utf-8"))
        for k, v in params:
            h.update(k.encode("utf-8"))
            h.update(v.encode("utf-8"))
        stem = endpoint.strip("/").replace("/", "-") or "root"
        return f"{stem}-{h.hexdigest()[:16]}"

    def path(self, key: str) -> Path:
        return self.base_dir / f"{key}.json"

    def _read(self, key: str) -> Optional[Dict[str, Any]]:
        path = self.path(key)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                entry = json.load(f)
            cached_at = datetime.fromisoformat(entry["cached_at"])
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Ignoring unreadable cache entry %s: %s", path, e)
            return None
        if cached_at.tzinfo is None:
            cached_at = cached_at.replace(tzinfo=timezone.utc)
        entry["cached_at"] = cached_at
        return entry

    def age(self, key: str) -> Optional[float]:
        """Seconds since the entry was written, or None if there is no readable entry."""
        entry = self._read(key)
        if entry is None:
            return None
        return (datetime.now(timezone.utc) - entry["cached_at"]).total_seconds()

    def get(self, key: str) -> Optional[Any]:
        entry = self._read(key)
        if entry is None:
            logger.debug("cache miss: %s", key)
            return None
        age = (datetime.now(timezone.utc) - entry["cached_at"]).total_seconds()
        if age >= self.ttl:
            logger.debug("cache stale: %s (%.0fs old)", key, age)
            return None
        logger.debug("cache hit: %s", key)
        return entry.get("data")

    def set(self, key: str, data: Any) -> None:
        entry = {"cached_at": datetime.now(timezone.utc).isoformat(), "data": data}
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.base_dir, prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(entry, f)
                os.replace(tmp, self.path(key))
            except BaseException:
                Path(tmp).unlink(missing_ok=True)
                raise
        except (OSError, TypeError, ValueError) as e:
            raise CacheError(f"Could not write cache entry {key}: {e}") from e

    def set_quota(self, quota: QuotaInfo) -> None:
        self.set(QUOTA_KEY, {"limit": quota.limit, "remaining": quota.remaining, "reset": quota.reset})

    def get_quota(self) -> Optional[QuotaInfo]:
        """Last recorded quota regardless of ``ttl``; its age is ``updated_at``."""
        entry = self._read(QUOTA_KEY)
        if entry is None:
            return None
        data = entry.get("data")
        try:
            return QuotaInfo(
                limit=int(data["limit"]),
                remaining=int(data["remaining"]),
                reset=str(data.get("reset") or "unknown"),
                updated_at=entry["cached_at"],
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning("Ignoring malformed quota entry: %s", e)
            return None

    def clear(self) -> int:
        removed = 0
        if not self.base_dir.exists():
            return removed
        for path in self.base_dir.glob("*.json"):
            try:
                path.unlink()
                removed += 1
            except OSError as e:
                logger.warning("Could not remove %s: %s", path, e)
        logger.info("Cleared %d cache entries from %s", removed, self.base_dir)
        return removed

    def stats(self) -> Dict[str, Any]:
        entries = sorted(self.base_dir.glob("*.json")) if self.base_dir.exists() else []
        fresh = 0
        for path in entries:
            age = self.age(path.stem)
            if age is not None and age < self.ttl:
                fresh += 1
        return {
            "cache_dir": str(self.base_dir),
            "entries": len(entries),
            "fresh": fresh,
            "total_bytes": sum(p.stat().st_size for p in entries),
            "ttl_seconds": self.ttl,
        }
