"""Bounded top-5 selection ordered by (dist2, id)"""

from dataclasses import dataclass
from typing import List, Tuple
import numpy as np

K = 5

# Reported by worst_distance_or_sentinel() until K candidates are held
UNBOUNDED: int = int(np.iinfo(np.int64).max)


@dataclass(frozen=True)
class NearestResult:
    """Snapshot of one agent returned by a query"""
    id: int
    x: int
    y: int
    dist2: int

    @property
    def rank_key(self) -> Tuple[int, int]:
        return (self.dist2, self.id)

    def to_dict(self) -> dict:
        return {
            'id': int(self.id),
            'x': int(self.x),
            'y': int(self.y),
            'dist2': int(self.dist2),
        }


@dataclass
class QueryStats:
    """Work performed by a single query"""
    candidates: int = 0
    cells_visited: int = 0
    buckets_visited: int = 0
    rings: int = 0

    def to_dict(self) -> dict:
        return {
            'candidates': self.candidates,
            'cells_visited': self.cells_visited,
            'buckets_visited': self.buckets_visited,
            'rings': self.rings,
        }


class TopKSelector:
    """
    Keeps the K best candidates seen so far, sorted ascending by (dist2, id).

    New entries are placed at the end and bubbled toward the front, so
    each add is O(K). Once full, a candidate must be strictly better than
    the current worst entry to be kept.
    """

    def __init__(self):
        self._items: List[NearestResult] = []

    def __len__(self) -> int:
        return len(self._items)

    @property
    def is_full(self) -> bool:
        return len(self._items) == K

    def add(self, candidate: NearestResult) -> bool:
        """Offer a candidate. Returns True if it was kept."""
        items = self._items
        if len(items) < K:
            items.append(candidate)
        elif candidate.rank_key < items[-1].rank_key:
            items[-1] = candidate
        else:
            return False

        # Bubble toward correct position
        i = len(items) - 1
        while i > 0 and items[i].rank_key < items[i - 1].rank_key:
            items[i], items[i - 1] = items[i - 1], items[i]
            i -= 1
        return True

    def worst_distance_or_sentinel(self) -> int:
        """dist2 of the Kth entry, or UNBOUNDED while fewer than K are held"""
        if len(self._items) < K:
            return UNBOUNDED
        return self._items[-1].dist2

    def drain_sorted(self) -> List[NearestResult]:
        """Held entries in ascending (dist2, id) order; the selector is emptied"""
        items = self._items
        self._items = []
        return items
