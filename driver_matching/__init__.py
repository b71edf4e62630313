"""Top-5 nearest-agent matching on a bounded integer grid"""

from .errors import MatchingError, ConfigurationError, OutOfBounds, CellConflict
from .config import MatcherConfig, get_config, load_config, set_config
from .spatial import (
    NearestResult,
    QueryStats,
    MatcherStrategy,
    LinearScanMatcher,
    RingExpansionMatcher,
    BucketGridMatcher,
    create_matcher,
)

__all__ = [
    "MatchingError",
    "ConfigurationError",
    "OutOfBounds",
    "CellConflict",
    "MatcherConfig",
    "get_config",
    "load_config",
    "set_config",
    "NearestResult",
    "QueryStats",
    "MatcherStrategy",
    "LinearScanMatcher",
    "RingExpansionMatcher",
    "BucketGridMatcher",
    "create_matcher",
]
__version__ = "0.1.0"
