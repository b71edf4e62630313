"""Event logging for matcher mutations and queries"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, Any, List, Optional, Tuple
from pathlib import Path
import json
import gzip
import time


class EventType(Enum):
    """Types of events to log"""
    UPSERT = auto()
    REMOVE = auto()
    CONFLICT = auto()
    OUT_OF_BOUNDS = auto()
    QUERY = auto()


@dataclass
class Event:
    """Single event record"""
    type: EventType
    seq: int
    data: Dict[str, Any]
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> dict:
        # Convert numpy types to Python native for JSON serialization
        import numpy as np

        def convert(obj):
            if isinstance(obj, np.integer):
                return int(obj)
            elif isinstance(obj, np.floating):
                return float(obj)
            elif isinstance(obj, dict):
                return {k: convert(v) for k, v in obj.items()}
            elif isinstance(obj, (list, tuple)):
                return [convert(v) for v in obj]
            return obj

        return {
            'type': self.type.name,
            'seq': int(self.seq),
            'data': convert(self.data),
            'timestamp': self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Event':
        return cls(
            type=EventType[data['type']],
            seq=data['seq'],
            data=data['data'],
            timestamp=data.get('timestamp', 0),
        )


class EventLogger:
    """
    Batched event logger for efficient disk writes.

    Events are buffered in memory and flushed to disk periodically
    or when buffer is full. Each event gets a monotonically increasing
    sequence number so a log can be read back in call order.
    """

    def __init__(
        self,
        log_dir: str,
        buffer_size: int = 10000,
        compress: bool = True
    ):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.buffer_size = buffer_size
        self.compress = compress

        self.buffer: List[Event] = []
        self.file_counter = 0
        self.next_seq = 0

        # Statistics
        self.total_events = 0
        self.events_by_type: Dict[EventType, int] = {t: 0 for t in EventType}

    def log(self, event_type: EventType, **data) -> None:
        """Log an event"""
        event = Event(type=event_type, seq=self.next_seq, data=data)
        self.next_seq += 1
        self.buffer.append(event)
        self.total_events += 1
        self.events_by_type[event_type] += 1

        if len(self.buffer) >= self.buffer_size:
            self.flush()

    def log_upsert(
        self,
        agent_id: int,
        x: int,
        y: int,
        previous: Optional[Tuple[int, int]],
        strategy: str
    ) -> None:
        """Log a placement or relocation"""
        self.log(
            EventType.UPSERT,
            agent_id=agent_id,
            x=x,
            y=y,
            previous=list(previous) if previous is not None else None,
            strategy=strategy,
        )

    def log_remove(self, agent_id: int, removed: bool, strategy: str) -> None:
        """Log a removal attempt"""
        self.log(
            EventType.REMOVE,
            agent_id=agent_id,
            removed=removed,
            strategy=strategy,
        )

    def log_conflict(
        self,
        agent_id: int,
        occupant_id: int,
        x: int,
        y: int,
        strategy: str
    ) -> None:
        """Log an upsert rejected because the cell is taken"""
        self.log(
            EventType.CONFLICT,
            agent_id=agent_id,
            occupant_id=occupant_id,
            x=x,
            y=y,
            strategy=strategy,
        )

    def log_out_of_bounds(self, agent_id: int, x: int, y: int, strategy: str) -> None:
        """Log an upsert rejected because the cell is off the grid"""
        self.log(
            EventType.OUT_OF_BOUNDS,
            agent_id=agent_id,
            x=x,
            y=y,
            strategy=strategy,
        )

    def log_query(
        self,
        x: int,
        y: int,
        result_ids: List[int],
        stats: Dict[str, int],
        strategy: str
    ) -> None:
        """Log a nearest-agent query and the work it did"""
        self.log(
            EventType.QUERY,
            x=x,
            y=y,
            result_ids=result_ids,
            strategy=strategy,
            **stats,
        )

    def flush(self) -> None:
        """Write buffer to disk"""
        if not self.buffer:
            return

        filename = f"events_{self.file_counter:08d}"
        if self.compress:
            filepath = self.log_dir / f"{filename}.jsonl.gz"
            with gzip.open(filepath, 'wt', encoding='utf-8') as f:
                for event in self.buffer:
                    f.write(json.dumps(event.to_dict()) + '\n')
        else:
            filepath = self.log_dir / f"{filename}.jsonl"
            with open(filepath, 'w', encoding='utf-8') as f:
                for event in self.buffer:
                    f.write(json.dumps(event.to_dict()) + '\n')

        self.buffer.clear()
        self.file_counter += 1

    def get_stats(self) -> Dict[str, Any]:
        """Get logging statistics"""
        return {
            'total_events': self.total_events,
            'events_by_type': {t.name: c for t, c in self.events_by_type.items()},
            'files_written': self.file_counter,
            'buffer_size': len(self.buffer),
        }

    def close(self) -> None:
        """Flush remaining events and close"""
        self.flush()


class EventReader:
    """Read events from log files"""

    def __init__(self, log_dir: str):
        self.log_dir = Path(log_dir)

    def read_all(self) -> List[Event]:
        """Read all events from all files, in sequence order"""
        events = []

        for filepath in sorted(self.log_dir.glob("events_*.jsonl*")):
            if filepath.suffix == '.gz':
                with gzip.open(filepath, 'rt', encoding='utf-8') as f:
                    for line in f:
                        events.append(Event.from_dict(json.loads(line)))
            else:
                with open(filepath, 'r', encoding='utf-8') as f:
                    for line in f:
                        events.append(Event.from_dict(json.loads(line)))

        events.sort(key=lambda e: e.seq)
        return events

    def read_by_type(self, event_type: EventType) -> List[Event]:
        """Read only events of a specific type"""
        return [e for e in self.read_all() if e.type == event_type]

    def read_seq_range(self, start_seq: int, end_seq: int) -> List[Event]:
        """Read events within a sequence range (inclusive)"""
        return [e for e in self.read_all() if start_seq <= e.seq <= end_seq]

    def agent_history(self, agent_id: int) -> Dict[str, Any]:
        """Reconstruct an agent's placements, moves and removal from the log"""
        history = {'agent_id': agent_id, 'positions': [], 'rejected': [], 'removed_at': None}

        for event in self.read_all():
            if event.data.get('agent_id') != agent_id:
                continue

            if event.type == EventType.UPSERT:
                history['positions'].append({
                    'seq': event.seq,
                    'x': event.data['x'],
                    'y': event.data['y'],
                })
            elif event.type in (EventType.CONFLICT, EventType.OUT_OF_BOUNDS):
                history['rejected'].append({
                    'seq': event.seq,
                    'reason': event.type.name,
                    'x': event.data['x'],
                    'y': event.data['y'],
                })
            elif event.type == EventType.REMOVE and event.data['removed']:
                history['removed_at'] = event.seq

        return history
