"""Closed set of nearest-agent strategies"""

from enum import Enum


class MatcherStrategy(str, Enum):
    """Matcher implementations selectable at construction time"""
    LINEAR = "linear"   # Full scan, correctness baseline
    RING = "ring"       # Expanding cell rings over the occupancy grid
    BUCKET = "bucket"   # Expanding bucket rings with rectangle-distance pruning
