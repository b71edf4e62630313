"""Authoritative agent positions with one-agent-per-cell occupancy"""

from typing import Dict, Tuple, Optional, Iterator, TYPE_CHECKING
import numpy as np

from ..errors import ConfigurationError, OutOfBounds, CellConflict

if TYPE_CHECKING:
    from ..core.events import EventLogger

# Occupancy value of a free cell
EMPTY = -1


class PositionStore:
    """
    Maps agent id -> (x, y) and keeps a dense occupancy grid in step with it.

    The grid is a flat int64 array indexed by x * height + y holding the
    occupant id or EMPTY. `cells` exposes it as a (width, height) view for
    slicing. Every mutation updates both structures or neither.
    """

    def __init__(
        self,
        width: int,
        height: int,
        event_logger: Optional['EventLogger'] = None,
        label: str = "store"
    ):
        if width <= 0 or height <= 0:
            raise ConfigurationError(f"Grid dimensions must be positive, got {width}x{height}")

        self.width = int(width)
        self.height = int(height)

        # Mutations are recorded here when set; label names the owning matcher
        self.event_logger = event_logger
        self.label = label

        self._grid = np.full(self.width * self.height, EMPTY, dtype=np.int64)
        self.cells = self._grid.reshape(self.width, self.height)

        self._positions: Dict[int, Tuple[int, int]] = {}

    def _index(self, x: int, y: int) -> int:
        return x * self.height + y

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def validate(self, agent_id: int, x: int, y: int) -> None:
        """
        Raise if upsert(agent_id, x, y) would fail. Never mutates.
        """
        if agent_id <= 0:
            raise ValueError(f"Agent id must be positive, got {agent_id}")
        if not self.in_bounds(x, y):
            raise OutOfBounds(x, y, self.width, self.height)

        occupant = int(self._grid[self._index(x, y)])
        if occupant != EMPTY and occupant != agent_id:
            raise CellConflict(x, y, occupant, agent_id)

    def upsert(self, agent_id: int, x: int, y: int) -> Optional[Tuple[int, int]]:
        """
        Place or relocate an agent.

        Returns the previous position, or None if the agent is new.
        Raises OutOfBounds or CellConflict with the store untouched.
        """
        agent_id, x, y = int(agent_id), int(x), int(y)
        try:
            self.validate(agent_id, x, y)
        except OutOfBounds:
            if self.event_logger is not None:
                self.event_logger.log_out_of_bounds(agent_id, x, y, self.label)
            raise
        except CellConflict as e:
            if self.event_logger is not None:
                self.event_logger.log_conflict(agent_id, e.occupant_id, x, y, self.label)
            raise

        old = self._positions.get(agent_id)
        if old is not None:
            self._grid[self._index(*old)] = EMPTY

        self._grid[self._index(x, y)] = agent_id
        self._positions[agent_id] = (x, y)

        if self.event_logger is not None:
            self.event_logger.log_upsert(agent_id, x, y, old, self.label)
        return old

    def remove(self, agent_id: int) -> bool:
        """Vacate the agent's cell. Returns False if the id is unknown."""
        agent_id = int(agent_id)
        pos = self._positions.pop(agent_id, None)
        if pos is not None:
            self._grid[self._index(*pos)] = EMPTY

        if self.event_logger is not None:
            self.event_logger.log_remove(agent_id, pos is not None, self.label)
        return pos is not None

    def position_of(self, agent_id: int) -> Optional[Tuple[int, int]]:
        return self._positions.get(int(agent_id))

    def occupant_of(self, x: int, y: int) -> Optional[int]:
        """Agent id at (x, y), or None for a free or out-of-grid cell"""
        if not self.in_bounds(x, y):
            return None
        occupant = int(self._grid[self._index(x, y)])
        return None if occupant == EMPTY else occupant

    def arrays(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Snapshot of (ids, xs, ys) as int64 arrays"""
        n = len(self._positions)
        ids = np.fromiter(self._positions.keys(), dtype=np.int64, count=n)
        coords = np.fromiter(
            (c for pos in self._positions.values() for c in pos),
            dtype=np.int64,
            count=2 * n,
        ).reshape(n, 2)
        return ids, coords[:, 0], coords[:, 1]

    def items(self) -> Iterator[Tuple[int, Tuple[int, int]]]:
        return iter(self._positions.items())

    def __len__(self) -> int:
        return len(self._positions)

    def __contains__(self, agent_id: int) -> bool:
        return agent_id in self._positions
