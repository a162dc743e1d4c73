"""Lazy Sequences - deferred, restartable sequences and their materialized snapshots."""

__version__ = "0.1.0"

from .exceptions import ExhaustionError, LazySequenceError, ReentrancyError
from .models import EXHAUSTED, EventKind, ProductionTally, TraversalEvent, TraversalState
from .sequence import LazySequence, MaterializedSequence, Traversal
from .sinks import ConsoleSink, EventLog, LoggingSink, TeeSink

__all__ = [
    # Sequences
    "LazySequence",
    "MaterializedSequence",
    "Traversal",
    "EXHAUSTED",
    # Models
    "TraversalState",
    "TraversalEvent",
    "EventKind",
    "ProductionTally",
    # Sinks
    "EventLog",
    "LoggingSink",
    "ConsoleSink",
    "TeeSink",
    # Errors
    "LazySequenceError",
    "ExhaustionError",
    "ReentrancyError",
]
