"""In-memory TTL cache for generated playbook content.

Keeps raw generator output keyed by a fingerprint of the inputs that shape
it, so a repeated submission of the same form does not pay for a second
upstream call. Process-local and protected by a threading lock; two racing
requests may both generate, and the later write wins.
"""

import hashlib
import json
import os
import re
import threading
import time
from typing import Dict, Optional, Tuple

DEFAULT_TTL_SECONDS = 3600.0

_WHITESPACE = re.compile(r"\s+")


def _normalize(text: str) -> str:
    return _WHITESPACE.sub(" ", (text or "").strip().lower())


def cache_enabled() -> bool:
    return os.getenv("CONTENT_CACHE_ENABLED", "true").lower() == "true"


class ContentCache:
    def __init__(self, ttl_seconds: Optional[float] = None) -> None:
        if ttl_seconds is None:
            ttl_seconds = float(os.getenv("CONTENT_CACHE_TTL_SECONDS", str(DEFAULT_TTL_SECONDS)))
        self.ttl_seconds = ttl_seconds
        self._entries: Dict[str, Tuple[float, str]] = {}
        self._lock = threading.Lock()

    def _now(self) -> float:
        return time.time()

    @staticmethod
    def key_for(product_name: str, target_audience: str, tier: str) -> str:
        payload = {
            "product": _normalize(product_name),
            "audience": _normalize(target_audience),
            "tier": _normalize(tier),
        }
        return hashlib.sha256(json.dumps(payload, sort_keys=True).encode()).hexdigest()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, content = entry
            if expires_at <= self._now():
                del self._entries[key]
                return None
            return content

    def set(self, key: str, content: str) -> None:
        with self._lock:
            now = self._now()
            # writes drop every expired entry so unread keys cannot pile up
            self._entries = {k: e for k, e in self._entries.items() if e[0] > now}
            self._entries[key] = (now + self.ttl_seconds, content)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
