"""Reproducible random agent placements and query streams"""

from typing import List, Tuple, Iterable, Optional
import numpy as np

from ..errors import ConfigurationError


def random_placements(
    width: int,
    height: int,
    count: int,
    rng: Optional[np.random.Generator] = None,
    first_id: int = 1
) -> List[Tuple[int, int, int]]:
    """
    (id, x, y) triples on distinct cells, ids consecutive from first_id.
    """
    if count > width * height:
        raise ConfigurationError(f"{count} agents do not fit on a {width}x{height} grid")
    rng = rng or np.random.default_rng()

    # Sample flat cell indices without replacement, index = x * height + y
    cells = rng.choice(width * height, size=count, replace=False)
    xs, ys = np.divmod(cells, height)

    return [
        (first_id + i, int(x), int(y))
        for i, (x, y) in enumerate(zip(xs, ys))
    ]


def random_queries(
    width: int,
    height: int,
    count: int,
    rng: Optional[np.random.Generator] = None
) -> List[Tuple[int, int]]:
    """Query points drawn uniformly from the grid"""
    rng = rng or np.random.default_rng()
    xs = rng.integers(0, width, size=count)
    ys = rng.integers(0, height, size=count)
    return [(int(x), int(y)) for x, y in zip(xs, ys)]


def apply_placements(matchers: Iterable, placements: Iterable[Tuple[int, int, int]]) -> None:
    """Upsert the same placements into every matcher"""
    matchers = list(matchers)
    for agent_id, x, y in placements:
        for matcher in matchers:
            matcher.upsert_agent(agent_id, x, y)
