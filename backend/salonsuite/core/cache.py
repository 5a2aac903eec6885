"""In-process TTL cache for report payloads, keyed per tenant."""
import json
import time
from threading import Lock
from typing import Any, Dict, Optional, Tuple

CACHE_PREFIX_REPORTS = "report"
CACHE_TTL_SHORT = 120
CACHE_TTL_MEDIUM = 3600


class _TTLStore:
    """Values are stored as JSON so callers never share mutable objects."""

    def __init__(self):
        self._entries: Dict[str, Tuple[float, str]] = {}
        self._lock = Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, raw = entry
            if time.monotonic() >= expires_at:
                del self._entries[key]
                return None
        return json.loads(raw)

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        raw = json.dumps(value, default=str)
        with self._lock:
            self._entries[key] = (time.monotonic() + ttl_seconds, raw)

    def drop_prefix(self, prefix: str) -> int:
        with self._lock:
            stale = [k for k in self._entries if k.startswith(prefix)]
            for k in stale:
                del self._entries[k]
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


_store = _TTLStore()


def cache_get(key: str) -> Optional[Any]:
    return _store.get(key)


def cache_set(key: str, value: Any, ttl_seconds: int = CACHE_TTL_MEDIUM) -> None:
    _store.set(key, value, ttl_seconds)


def cache_clear() -> None:
    _store.clear()


def report_cache_key(report_type: str, tenant_id: str, start: str, end: str) -> str:
    return f"{CACHE_PREFIX_REPORTS}:{tenant_id}:{report_type}:{start}:{end}"


def invalidate_tenant_reports(tenant_id: str) -> int:
    """Drop every cached report for a tenant (call after invoice/expense writes)."""
    return _store.drop_prefix(f"{CACHE_PREFIX_REPORTS}:{tenant_id}:")
