"""Operation counters for a MinhashLSH index."""
from __future__ import annotations

import threading
from typing import Any, Dict

import psutil


class IndexStats:
    """Track index statistics."""

    def __init__(self):
        self._lock = threading.Lock()
        self.total_added = 0
        self.total_overwritten = 0
        self.total_removed = 0
        self.unknown_removes = 0
        self.total_rebuilds = 0
        self.total_queries = 0
        self.total_candidates = 0
        self.last_indexed_items = 0
        self.last_rebuild_seconds = 0.0
        self.rebuild_seconds_total = 0.0

    def add_staged(self, overwrite: bool) -> None:
        """Record an ``add`` call."""
        with self._lock:
            self.total_added += 1
            if overwrite:
                self.total_overwritten += 1

    def add_removed(self, known: bool) -> None:
        """Record a ``remove`` call."""
        with self._lock:
            if known:
                self.total_removed += 1
            else:
                self.unknown_removes += 1

    def add_rebuild(self, items: int, seconds: float) -> None:
        """Record a completed ``index`` call."""
        with self._lock:
            self.total_rebuilds += 1
            self.last_indexed_items = items
            self.last_rebuild_seconds = seconds
            self.rebuild_seconds_total += seconds

    def add_query(self, candidates: int) -> None:
        """Record a ``query`` call."""
        with self._lock:
            self.total_queries += 1
            self.total_candidates += candidates

    def get_summary(self) -> Dict[str, Any]:
        """Get index statistics summary."""
        with self._lock:
            return {
                'added': self.total_added,
                'overwritten': self.total_overwritten,
                'removed': self.total_removed,
                'unknown_removes': self.unknown_removes,
                'rebuilds': self.total_rebuilds,
                'indexed_items': self.last_indexed_items,
                'last_rebuild_seconds': self.last_rebuild_seconds,
                'average_rebuild_seconds': self.rebuild_seconds_total / max(self.total_rebuilds, 1),
                'queries': self.total_queries,
                'average_candidates': self.total_candidates / max(self.total_queries, 1),
                'resident_memory_mb': psutil.Process().memory_info().rss / 1024 / 1024,
            }
