"""Per-wallet cache entries."""

import itertools
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from ..models import Asset, Collection


@dataclass
class CacheEntry:
    """Cached assets of one wallet for one load cycle.

    ``generation`` increases every time the wallet's entry is reset, so a
    background loop can tell that the entry it was filling has been replaced.
    """

    generation: int = 0
    assets: list[Asset] = field(default_factory=list)
    collections: list[Collection] = field(default_factory=list)
    last_updated: datetime | None = None
    total_count: int | None = None
    is_complete: bool = False

    def is_fresh(self, now: datetime, ttl: timedelta) -> bool:
        """Whether the entry holds data loaded less than ``ttl`` ago."""
        return self.last_updated is not None and now - self.last_updated < ttl


class CacheStore:
    """Map of canonical wallet id to ``CacheEntry``."""

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._entries: dict[str, CacheEntry] = {}
        # Store-wide so generations never repeat, even after a delete
        self._generations = itertools.count(1)

    def get(self, wallet_id: str) -> CacheEntry | None:
        return self._entries.get(wallet_id)

    def reset(self, wallet_id: str) -> CacheEntry:
        """Replace the wallet's entry with an empty one of a new generation."""
        entry = CacheEntry(generation=next(self._generations))
        self._entries[wallet_id] = entry
        return entry

    def is_current(self, wallet_id: str, entry: CacheEntry) -> bool:
        """Whether ``entry`` is still the wallet's live entry."""
        return self._entries.get(wallet_id) is entry

    def delete(self, wallet_id: str) -> bool:
        return self._entries.pop(wallet_id, None) is not None

    def clear(self) -> None:
        """Drop every wallet entry."""
        self._entries.clear()

    def wallet_ids(self) -> list[str]:
        return list(self._entries)

    def __contains__(self, wallet_id: str) -> bool:
        return wallet_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)
