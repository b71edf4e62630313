"""Error taxonomy for the matching core"""


class MatchingError(Exception):
    """Base class for all matcher errors"""


class ConfigurationError(MatchingError, ValueError):
    """Invalid construction parameters (grid size, bucket size, strategy)"""


class OutOfBounds(MatchingError, IndexError):
    """Coordinate outside [0, width) x [0, height)"""

    def __init__(self, x: int, y: int, width: int, height: int):
        super().__init__(f"Out of bounds: ({x},{y}) for grid {width}x{height}")
        self.x = x
        self.y = y
        self.width = width
        self.height = height


class CellConflict(MatchingError, RuntimeError):
    """Target cell is already held by a different agent"""

    def __init__(self, x: int, y: int, occupant_id: int, agent_id: int):
        super().__init__(
            f"Cell ({x},{y}) already occupied by agent {occupant_id}, "
            f"cannot place agent {agent_id}"
        )
        self.x = x
        self.y = y
        self.occupant_id = occupant_id
        self.agent_id = agent_id
