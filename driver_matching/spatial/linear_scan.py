"""Full-scan baseline matcher"""

from typing import List, Tuple, Optional, TYPE_CHECKING

from .distance import squared_euclidean_many
from .store import PositionStore
from .strategy import MatcherStrategy
from .topk import NearestResult, QueryStats, TopKSelector

if TYPE_CHECKING:
    from ..core.events import EventLogger


class LinearScanMatcher:
    """
    Evaluates every stored agent on each query. O(agents) per query,
    no pruning. The other strategies must return exactly what this returns.
    """

    strategy = MatcherStrategy.LINEAR

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
        x, y = int(x), int(y)
        top = TopKSelector()
        stats = QueryStats()

        ids, xs, ys = self.store.arrays()
        dist2 = squared_euclidean_many(x, y, xs, ys)

        for agent_id, ax, ay, d2 in zip(ids.tolist(), xs.tolist(), ys.tolist(), dist2.tolist()):
            top.add(NearestResult(agent_id, ax, ay, d2))
        stats.candidates = len(ids)

        results = top.drain_sorted()
        if self.event_logger is not None:
            self.event_logger.log_query(
                x, y, [r.id for r in results], stats.to_dict(), self.strategy.value
            )
        return results, stats

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
