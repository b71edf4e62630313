"""Strategy selection for nearest-agent matchers"""

from typing import Optional, Union, Dict, List, TYPE_CHECKING

from .bucket_grid import BucketGridMatcher, DEFAULT_BUCKET_SIZE
from .linear_scan import LinearScanMatcher
from .ring_grid import RingExpansionMatcher
from .strategy import MatcherStrategy
from ..errors import ConfigurationError

if TYPE_CHECKING:
    from ..config import MatcherConfig
    from ..core.events import EventLogger

Matcher = Union[LinearScanMatcher, RingExpansionMatcher, BucketGridMatcher]


def create_matcher(
    strategy: Union[MatcherStrategy, str],
    width: int,
    height: int,
    bucket_size: int = DEFAULT_BUCKET_SIZE,
    event_logger: Optional['EventLogger'] = None
) -> Matcher:
    """Build the matcher for a strategy. bucket_size only applies to BUCKET."""
    try:
        strategy = MatcherStrategy(strategy)
    except ValueError:
        raise ConfigurationError(f"Unknown strategy: {strategy!r}") from None

    if strategy == MatcherStrategy.LINEAR:
        return LinearScanMatcher(width, height, event_logger=event_logger)
    if strategy == MatcherStrategy.RING:
        return RingExpansionMatcher(width, height, event_logger=event_logger)
    return BucketGridMatcher(width, height, bucket_size, event_logger=event_logger)


def create_from_config(
    config: 'MatcherConfig',
    strategy: Optional[Union[MatcherStrategy, str]] = None,
    event_logger: Optional['EventLogger'] = None
) -> Matcher:
    """Build a matcher from config, optionally overriding the strategy"""
    return create_matcher(
        strategy if strategy is not None else config.STRATEGY,
        config.GRID_WIDTH,
        config.GRID_HEIGHT,
        bucket_size=config.BUCKET_SIZE,
        event_logger=event_logger,
    )


def create_all(width: int, height: int, bucket_size: int = DEFAULT_BUCKET_SIZE) -> Dict[MatcherStrategy, Matcher]:
    """One matcher per strategy, all over the same grid"""
    return {s: create_matcher(s, width, height, bucket_size) for s in MatcherStrategy}


def strategy_names() -> List[str]:
    return [s.value for s in MatcherStrategy]
