"""
Hint Cache - Caches advice by board summary hash.

The cache:
- Uses a content hash of the board summary as key
- Lives in memory only (no persistence in the system)
- Is bounded; the least recently stored entry goes first
"""

from __future__ import annotations
import hashlib
import time
from collections import OrderedDict
from dataclasses import dataclass


@dataclass
class CacheEntry:
    """A cached hint."""
    summary_hash: str
    model: str
    text: str

    created_at: float = 0.0
    access_count: int = 0


class HintCache:
    """
    In-memory cache of hints.

    Usage:
        cache = HintCache()

        text = cache.get(summary_text, model)
        if text is None:
            text = ask_model(summary_text)
            cache.put(summary_text, model, text)
    """

    def __init__(self, max_entries: int = 256):
        self.max_entries = max_entries
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, summary_text: str, model: str) -> str | None:
        """Get cached hint text, or None."""
        entry = self._entries.get(self._make_cache_key(summary_text, model))
        if entry is None:
            return None
        entry.access_count += 1
        return entry.text

    def put(self, summary_text: str, model: str, text: str):
        """Cache a hint."""
        key = self._make_cache_key(summary_text, model)
        self._entries[key] = CacheEntry(
            summary_hash=key,
            model=model,
            text=text,
            created_at=time.time(),
        )
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    def clear(self):
        self._entries.clear()

    def _make_cache_key(self, summary_text: str, model: str) -> str:
        return hashlib.sha256(f"{model}\n{summary_text}".encode()).hexdigest()[:16]
