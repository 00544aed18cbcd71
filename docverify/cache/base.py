from abc import ABC, abstractmethod
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from docverify.cache.models import FraudPatternEntry


class BaseFraudPatternCache(ABC):
    """Contract for duplicate-submission stores shared across requests.

    Implementations must make ``check_and_record`` atomic: two concurrent
    submissions of the same hash must not both observe a first sighting.
    """

    @abstractmethod
    def check_and_record(
        self,
        content_hash: str,
        seen_at: datetime,
        metadata: Mapping[str, Any] | None = None,
    ) -> FraudPatternEntry | None:
        """Look up a hash and record it when unseen.

        Returns:
            The existing entry if the hash was seen before (left unchanged),
            otherwise None after inserting a new entry.
        """

    @abstractmethod
    def get(self, content_hash: str) -> FraudPatternEntry | None:
        """Return the entry for a hash without modifying the cache."""

    @abstractmethod
    def evict_older_than(self, cutoff: datetime) -> int:
        """Remove entries first seen before ``cutoff``. Returns the count removed."""

    @abstractmethod
    def __len__(self) -> int: ...
