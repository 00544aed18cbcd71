from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class FraudPatternEntry:
    """First sighting of a document content hash."""

    content_hash: str
    first_seen: datetime
    metadata: Mapping[str, Any] = field(default_factory=dict)
