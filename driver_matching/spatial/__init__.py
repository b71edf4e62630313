from .distance import squared_euclidean, squared_euclidean_many, point_rect_squared_distance
from .topk import NearestResult, QueryStats, TopKSelector, K, UNBOUNDED
from .store import PositionStore, EMPTY
from .strategy import MatcherStrategy
from .linear_scan import LinearScanMatcher
from .ring_grid import RingExpansionMatcher
from .bucket_grid import BucketGridMatcher, DEFAULT_BUCKET_SIZE
from .matchers import Matcher, create_matcher, create_from_config, create_all, strategy_names

__all__ = [
    "squared_euclidean",
    "squared_euclidean_many",
    "point_rect_squared_distance",
    "NearestResult",
    "QueryStats",
    "TopKSelector",
    "K",
    "UNBOUNDED",
    "PositionStore",
    "EMPTY",
    "MatcherStrategy",
    "LinearScanMatcher",
    "RingExpansionMatcher",
    "BucketGridMatcher",
    "DEFAULT_BUCKET_SIZE",
    "Matcher",
    "create_matcher",
    "create_from_config",
    "create_all",
    "strategy_names",
]
