"""Deterministic output cache for normalization calls.

Responsibilities:
- Build stable cache keys from operation name and exact input text.
- Reuse outputs for repeated inputs within one engine lifetime.
- Track basic cache telemetry (hits/misses) for diagnostics.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from hashlib import sha256
import threading


@dataclass(slots=True)
class NormalizationCache:
    """Bounded least-recently-used cache keyed by operation and input text."""

    max_entries: int = 1024
    entries: OrderedDict[str, str] = field(default_factory=OrderedDict)
    hits: int = 0
    misses: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.max_entries <= 0:
            raise ValueError("`max_entries` must be a positive integer.")

    @staticmethod
    def make_key(*, operation: str, text: str) -> str:
        """Build a cache key; whitespace is significant, so text is hashed verbatim."""

        text_hash = sha256(text.encode("utf-8")).hexdigest()
        return f"itn:{operation.strip().lower()}:{text_hash}"

    def get(self, cache_key: str) -> str | None:
        """Return the cached output for a key and update hit/miss counters."""

        with self._lock:
            if cache_key in self.entries:
                self.hits += 1
                self.entries.move_to_end(cache_key)
                return self.entries[cache_key]
            self.misses += 1
            return None

    def set(self, cache_key: str, value: str) -> None:
        """Store an output, evicting the least recently used entry when full."""

        with self._lock:
            self.entries[cache_key] = value
            self.entries.move_to_end(cache_key)
            while len(self.entries) > self.max_entries:
                self.entries.popitem(last=False)

    def hit_rate(self) -> float:
        """Return cache hit rate for the current cache lifecycle."""

        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return self.hits / float(total)
