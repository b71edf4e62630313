"""Nearest-agent search by expanding square rings over grid cells"""

from typing import List, Tuple, Optional, TYPE_CHECKING
import numpy as np

from .distance import squared_euclidean
from .store import PositionStore, EMPTY
from .strategy import MatcherStrategy
from .topk import NearestResult, QueryStats, TopKSelector

if TYPE_CHECKING:
    from ..core.events import EventLogger


class RingExpansionMatcher:
    """
    Walks the occupancy grid outward from the query cell.

    Ring r is the boundary of the square of half-width r around the
    query point: top and bottom rows first, then the left and right
    columns without their corners. Only boundary cells that fall inside
    the grid are read, so each cell is visited at most once per query.

    After ring r every cell with Chebyshev distance <= r has been seen,
    and any unseen cell is at squared distance >= (r+1)^2. The search
    stops once 5 candidates are held and r^2 exceeds the 5th best, or
    once the square covers the whole grid. Fast on dense maps.
    """

    strategy = MatcherStrategy.RING

    def __init__(
        self,
        width: int,
        height: int,
        event_logger: Optional['EventLogger'] = None
    ):
        self.store = PositionStore(width, height, event_logger, self.strategy.value)
        self.event_logger = event_logger

    def upsert_agent(self, agent_id: int, x: int, y: int) -> None:
        self.store.upsert(agent_id, x, y)

    def remove_agent(self, agent_id: int) -> bool:
        return self.store.remove(agent_id)

    def find_nearest(self, x: int, y: int) -> List[NearestResult]:
        """Up to 5 nearest agents ascending by (dist2, id)"""
        return self.find_nearest_with_stats(x, y)[0]

    def find_nearest_with_stats(self, x: int, y: int) -> Tuple[List[NearestResult], QueryStats]:
        qx, qy = int(x), int(y)
        top = TopKSelector()
        stats = QueryStats()

        if len(self.store) > 0:
            self._expand(qx, qy, top, stats)

        results = top.drain_sorted()
        if self.event_logger is not None:
            self.event_logger.log_query(
                qx, qy, [r.id for r in results], stats.to_dict(), self.strategy.value
            )
        return results, stats

    def _expand(self, qx: int, qy: int, top: TopKSelector, stats: QueryStats) -> None:
        cells = self.store.cells
        w, h = self.store.width, self.store.height

        # Rings closer than this lie entirely off the grid
        r = max(0, -qx, qx - (w - 1), -qy, qy - (h - 1))
        while True:
            x0, x1 = qx - r, qx + r
            y0, y1 = qy - r, qy + r
            xa, xb = max(0, x0), min(w - 1, x1)
            ya, yb = max(0, y0), min(h - 1, y1)

            # Top and bottom rows, corners included
            if xa <= xb:
                for y in ((y0,) if y0 == y1 else (y0, y1)):
                    if 0 <= y < h:
                        self._scan(qx, qy, cells[xa:xb + 1, y], top, stats)

            # Left and right columns, corners excluded
            ca, cb = max(ya, y0 + 1), min(yb, y1 - 1)
            if ca <= cb:
                for x in ((x0,) if x0 == x1 else (x0, x1)):
                    if 0 <= x < w:
                        self._scan(qx, qy, cells[x, ca:cb + 1], top, stats)

            stats.rings += 1

            if top.is_full and r * r > top.worst_distance_or_sentinel():
                break
            if x0 <= 0 and y0 <= 0 and x1 >= w - 1 and y1 >= h - 1:
                break
            r += 1

    def _scan(
        self,
        qx: int,
        qy: int,
        line: np.ndarray,
        top: TopKSelector,
        stats: QueryStats
    ) -> None:
        """Feed every occupied cell of a row or column segment to the selector"""
        stats.cells_visited += line.size

        for agent_id in line[line != EMPTY].tolist():
            pos = self.store.position_of(agent_id)
            if pos is None:
                continue
            stats.candidates += 1
            top.add(NearestResult(agent_id, pos[0], pos[1], squared_euclidean(qx, qy, *pos)))

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
