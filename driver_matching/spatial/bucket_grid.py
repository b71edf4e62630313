"""Spatial hashing by fixed-size square buckets"""

from typing import Dict, List, Tuple, Optional, Iterator, TYPE_CHECKING
import numpy as np

from .distance import squared_euclidean, point_rect_squared_distance
from .store import PositionStore
from .strategy import MatcherStrategy
from .topk import NearestResult, QueryStats, TopKSelector, UNBOUNDED
from ..errors import ConfigurationError

if TYPE_CHECKING:
    from ..core.events import EventLogger

DEFAULT_BUCKET_SIZE = 32


class BucketGridMatcher:
    """
    Spatial partitioning using a bucket grid for nearest-agent queries.

    The grid is divided into bucket_size x bucket_size buckets. Each
    non-empty bucket keeps an unordered list of occupant ids; a reverse
    mapping records each agent's bucket and its slot in that list so a
    relocation is a swap-with-last-and-pop. Buckets are created on first
    occupancy and dropped when they empty.

    Queries expand square rings over bucket coordinates around the
    query's bucket. After each ring, the squared distance from the query
    point to the footprint of every bucket on the next ring is computed;
    once the smallest of those exceeds the 5th best candidate, no
    unexplored bucket can hold a better agent and the search stops.
    """

    strategy = MatcherStrategy.BUCKET

    def __init__(
        self,
        width: int,
        height: int,
        bucket_size: int = DEFAULT_BUCKET_SIZE,
        event_logger: Optional['EventLogger'] = None
    ):
        if bucket_size <= 0:
            raise ConfigurationError(f"Bucket size must be positive, got {bucket_size}")

        self.store = PositionStore(width, height, event_logger, self.strategy.value)
        self.event_logger = event_logger

        self.bucket_size = int(bucket_size)
        self.buckets_x = int(np.ceil(self.store.width / self.bucket_size))
        self.buckets_y = int(np.ceil(self.store.height / self.bucket_size))

        # Bucket storage: (bucket_x, bucket_y) -> occupant ids
        self._buckets: Dict[Tuple[int, int], List[int]] = {}

        # Reverse mapping: agent_id -> (bucket, index in that bucket's list)
        self._membership: Dict[int, Tuple[Tuple[int, int], int]] = {}

    def bucket_for(self, x: int, y: int) -> Tuple[int, int]:
        """Convert cell coordinates to bucket coordinates"""
        return (x // self.bucket_size, y // self.bucket_size)

    def upsert_agent(self, agent_id: int, x: int, y: int) -> None:
        agent_id, x, y = int(agent_id), int(x), int(y)
        self.store.upsert(agent_id, x, y)
        self._move_membership(agent_id, self.bucket_for(x, y))

    def remove_agent(self, agent_id: int) -> bool:
        agent_id = int(agent_id)
        removed = self.store.remove(agent_id)
        if removed:
            self._move_membership(agent_id, None)
        return removed

    def _move_membership(self, agent_id: int, new_bucket: Optional[Tuple[int, int]]) -> None:
        """
        Move an agent to new_bucket, or drop it from the index when None.

        Both the bucket lists and the reverse mapping are only ever
        changed here.
        """
        current = self._membership.get(agent_id)
        if current is not None and current[0] == new_bucket:
            return

        if current is not None:
            old_bucket, slot = current
            members = self._buckets[old_bucket]
            last = members.pop()
            if last != agent_id:
                members[slot] = last
                self._membership[last] = (old_bucket, slot)
            if not members:
                del self._buckets[old_bucket]
            del self._membership[agent_id]

        if new_bucket is not None:
            members = self._buckets.setdefault(new_bucket, [])
            members.append(agent_id)
            self._membership[agent_id] = (new_bucket, len(members) - 1)

    def find_nearest(self, x: int, y: int) -> List[NearestResult]:
        """Up to 5 nearest agents ascending by (dist2, id)"""
        return self.find_nearest_with_stats(x, y)[0]

    def find_nearest_with_stats(self, x: int, y: int) -> Tuple[List[NearestResult], QueryStats]:
        qx, qy = int(x), int(y)
        top = TopKSelector()
        stats = QueryStats()

        if self._buckets:
            self._expand(qx, qy, top, stats)

        results = top.drain_sorted()
        if self.event_logger is not None:
            self.event_logger.log_query(
                qx, qy, [r.id for r in results], stats.to_dict(), self.strategy.value
            )
        return results, stats

    def _expand(self, qx: int, qy: int, top: TopKSelector, stats: QueryStats) -> None:
        # Ring centre is clamped into the bucket grid; footprint distance
        # along each axis is then non-decreasing in ring radius
        cbx, cby = self.bucket_for(qx, qy)
        cbx = min(max(cbx, 0), self.buckets_x - 1)
        cby = min(max(cby, 0), self.buckets_y - 1)

        r = 0
        while True:
            for bucket in self._ring(cbx, cby, r):
                stats.buckets_visited += 1
                members = self._buckets.get(bucket)
                if not members:
                    continue
                for agent_id in members:
                    pos = self.store.position_of(agent_id)
                    if pos is None:
                        continue
                    stats.candidates += 1
                    top.add(NearestResult(agent_id, pos[0], pos[1], squared_euclidean(qx, qy, *pos)))

            stats.rings += 1

            if (cbx - r <= 0 and cby - r <= 0 and
                    cbx + r >= self.buckets_x - 1 and cby + r >= self.buckets_y - 1):
                break

            if top.is_full:
                bound = min(
                    (self._footprint_distance(qx, qy, b) for b in self._ring(cbx, cby, r + 1)),
                    default=UNBOUNDED,
                )
                if bound > top.worst_distance_or_sentinel():
                    break
            r += 1

    def _ring(self, cbx: int, cby: int, r: int) -> Iterator[Tuple[int, int]]:
        """In-grid buckets on the boundary of the square of half-width r, each once"""
        x0, x1 = cbx - r, cbx + r
        y0, y1 = cby - r, cby + r
        xa, xb = max(0, x0), min(self.buckets_x - 1, x1)
        ya, yb = max(0, y0), min(self.buckets_y - 1, y1)

        for by in ((y0,) if y0 == y1 else (y0, y1)):
            if 0 <= by < self.buckets_y:
                for bx in range(xa, xb + 1):
                    yield (bx, by)

        for bx in ((x0,) if x0 == x1 else (x0, x1)):
            if 0 <= bx < self.buckets_x:
                for by in range(max(ya, y0 + 1), min(yb, y1 - 1) + 1):
                    yield (bx, by)

    def _footprint_distance(self, qx: int, qy: int, bucket: Tuple[int, int]) -> int:
        """Squared distance from the query to the nearest cell of a bucket"""
        x0 = bucket[0] * self.bucket_size
        y0 = bucket[1] * self.bucket_size
        x1 = min(x0 + self.bucket_size, self.store.width) - 1
        y1 = min(y0 + self.bucket_size, self.store.height) - 1
        return point_rect_squared_distance(qx, qy, x0, y0, x1, y1)

    def bucket_of(self, agent_id: int) -> Optional[Tuple[int, int]]:
        current = self._membership.get(agent_id)
        return current[0] if current is not None else None

    def bucket_members(self, bx: int, by: int) -> List[int]:
        """Copy of the occupant ids of a bucket (empty if it does not exist)"""
        return list(self._buckets.get((bx, by), ()))

    @property
    def bucket_count(self) -> int:
        """Number of non-empty buckets"""
        return len(self._buckets)

    def get_density_map(self) -> np.ndarray:
        """Return 2D array of agent counts per bucket, indexed [bx, by]"""
        density = np.zeros((self.buckets_x, self.buckets_y), dtype=np.int32)
        for (bx, by), members in self._buckets.items():
            density[bx, by] = len(members)
        return density

    @property
    def width(self) -> int:
        return self.store.width

    @property
    def height(self) -> int:
        return self.store.height

    def position_of(self, agent_id: int) -> Optional[Tuple[int, int]]:
        return self.store.position_of(agent_id)

    def occupant_of(self, x: int, y: int) -> Optional[int]:
        return self.store.occupant_of(x, y)

    def __len__(self) -> int:
        return len(self.store)

    def __contains__(self, agent_id: int) -> bool:
        return agent_id in self.store
