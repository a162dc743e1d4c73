"""Data models shared by sequences, sinks and demos."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class _Exhausted:
    """Sentinel type returned by a producer to signal normal completion."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "EXHAUSTED"

    def __bool__(self) -> bool:
        return False


EXHAUSTED = _Exhausted()


class TraversalState(str, Enum):
    """Lifecycle of a single traversal."""

    NOT_STARTED = "not_started"
    PRODUCING = "producing"
    YIELDED = "yielded"
    EXHAUSTED = "exhausted"
    FAULTED = "faulted"
    ABANDONED = "abandoned"

    @property
    def is_terminal(self) -> bool:
        return self in (
            TraversalState.EXHAUSTED,
            TraversalState.FAULTED,
            TraversalState.ABANDONED,
        )


class EventKind(str, Enum):
    """Kinds of events reported to an observation sink."""

    STARTED = "started"
    YIELDED = "yielded"
    EXHAUSTED = "exhausted"
    FAULTED = "faulted"
    ABANDONED = "abandoned"


@dataclass(frozen=True)
class TraversalEvent:
    """Something observable that happened during a traversal."""

    sequence: str
    traversal_id: int
    kind: EventKind
    position: int
    value: Any = None

    def to_dict(self) -> Dict:
        """Convert event to dictionary."""
        return {
            "sequence": self.sequence,
            "traversal_id": self.traversal_id,
            "kind": self.kind.value,
            "position": self.position,
            "value": self.value,
        }


@dataclass
class ProductionTally:
    """External side-effect counter, incremented once per produced element."""

    produced: int = 0

    def record(self) -> int:
        """Record one production and return the new total."""
        self.produced += 1
        return self.produced

    def reset(self) -> None:
        self.produced = 0


@dataclass
class DemoResult:
    """Outcome of one demonstration."""

    name: str
    values: List[Any] = field(default_factory=list)
    tally_snapshots: List[int] = field(default_factory=list)
    productions: int = 0
    count: Optional[int] = None

    def to_dict(self) -> Dict:
        """Convert result to a flat dictionary for tabular display."""
        return {
            "demo": self.name,
            "values": ", ".join(str(v) for v in self.values),
            "tally_snapshots": ", ".join(str(s) for s in self.tally_snapshots),
            "productions": self.productions,
            "count": self.count,
        }
