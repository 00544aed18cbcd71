import threading
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from docverify.cache.base import BaseFraudPatternCache
from docverify.cache.models import FraudPatternEntry


class InMemoryFraudPatternCache(BaseFraudPatternCache):
    """Process-local cache guarded by a single lock.

    Entries are only removed by ``evict_older_than``; between maintenance
    calls the cache grows without bound.
    """

    def __init__(self, entries: Iterable[FraudPatternEntry] = ()) -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, FraudPatternEntry] = {e.content_hash: e for e in entries}

    def check_and_record(
        self,
        content_hash: str,
        seen_at: datetime,
        metadata: Mapping[str, Any] | None = None,
    ) -> FraudPatternEntry | None:
        with self._lock:
            existing = self._entries.get(content_hash)
            if existing is not None:
                return existing
            self._entries[content_hash] = FraudPatternEntry(
                content_hash=content_hash,
                first_seen=seen_at,
                metadata=dict(metadata or {}),
            )
            return None

    def get(self, content_hash: str) -> FraudPatternEntry | None:
        with self._lock:
            return self._entries.get(content_hash)

    def evict_older_than(self, cutoff: datetime) -> int:
        with self._lock:
            stale = [h for h, e in self._entries.items() if e.first_seen < cutoff]
            for content_hash in stale:
                del self._entries[content_hash]
            return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
