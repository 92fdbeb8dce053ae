"""Plan cache - holds compiled mappers per (source type, target type) pair.

Entries are created lazily on first use and live until cleared. Reads
take no lock; a lock guards publication and clearing.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any

CacheKey = tuple[type, type]


class PlanCache:
    """Stores compiled mappers keyed by the ordered (source, target) pair.

    ``(A, B)`` and ``(B, A)`` are distinct entries. The cache never holds
    data instances, only compiled mappers.
    """

    def __init__(self) -> None:
        self._entries: dict[CacheKey, Any] = {}
        self._lock = threading.Lock()

    def get(self, source_type: type, target_type: type) -> Any | None:
        """Look up a compiled mapper, or None on a miss."""
        return self._entries.get((source_type, target_type))

    def get_or_build(
        self,
        source_type: type,
        target_type: type,
        build: Callable[[], Any],
    ) -> Any:
        """Return the cached mapper, building and publishing it on a miss.

        Concurrent builders of the same pair may each run ``build``; the
        first published entry is kept and returned to all of them.
        """
        key = (source_type, target_type)
        entry = self._entries.get(key)
        if entry is not None:
            return entry

        built = build()
        with self._lock:
            return self._entries.setdefault(key, built)

    def clear(self) -> None:
        """Drop every entry. Mappers already handed out stay usable."""
        with self._lock:
            self._entries = {}

    @property
    def keys(self) -> list[CacheKey]:
        """Cached type pairs, in insertion order."""
        return list(self._entries.keys())

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        """Number of cached type pairs."""
        return len(self._entries)
