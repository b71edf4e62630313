from .events import EventLogger, EventReader, EventType, Event
from .workload import random_placements, random_queries, apply_placements

__all__ = [
    "EventLogger",
    "EventReader",
    "EventType",
    "Event",
    "random_placements",
    "random_queries",
    "apply_placements",
]
