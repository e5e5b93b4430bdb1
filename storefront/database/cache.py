"""
Lightweight in-memory tag cache for local development and tests.

Implements the interface the catalog service uses (get / set /
invalidate_tag / ping) so the API can run without a Redis instance.
"""

from __future__ import annotations

import copy
import time
from typing import Any, Dict, Iterable, Optional, Set, Tuple


class TagCache:
    def __init__(self, default_ttl: int = 86400) -> None:
        self._default_ttl = default_ttl
        # key -> (expires_at, value)
        self._entries: Dict[str, Tuple[float, Any]] = {}
        # tag -> keys
        self._tags: Dict[str, Set[str]] = {}

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if expires_at <= time.monotonic():
            self._remove({key})
            return None
        return copy.deepcopy(value)

    def set(self, key: str, value: Any, tags: Iterable[str] = (), ttl: Optional[int] = None) -> None:
        self._sweep()
        self._entries[key] = (time.monotonic() + (ttl or self._default_ttl), copy.deepcopy(value))
        for tag in tags:
            self._tags.setdefault(tag, set()).add(key)

    def _remove(self, keys: Set[str]) -> int:
        """Drop ``keys`` from the entries and from every tag set; returns how many entries went."""
        removed = 0
        for key in keys:
            if self._entries.pop(key, None) is not None:
                removed += 1
        for tag in list(self._tags):
            remaining = self._tags[tag] - keys
            if remaining:
                self._tags[tag] = remaining
            else:
                del self._tags[tag]
        return removed

    def _sweep(self) -> None:
        now = time.monotonic()
        expired = {key for key, (expires_at, _) in self._entries.items() if expires_at <= now}
        if expired:
            self._remove(expired)

    def invalidate_tag(self, tag: str) -> int:
        """Drop every entry stored under ``tag``; returns how many were dropped."""
        removed = self._remove(set(self._tags.get(tag, ())))
        self._tags.pop(tag, None)
        return removed

    def ping(self) -> bool:
        return True
