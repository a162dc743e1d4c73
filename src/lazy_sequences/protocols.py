"""Protocol definitions for dependency inversion."""

from typing import Any, Protocol, Tuple, Union

from .models import TraversalEvent, _Exhausted


# What a producer returns for one step: the value and the state to resume
# from, or EXHAUSTED.
Step = Union[Tuple[Any, Any], _Exhausted]


class Producer(Protocol):
    """Protocol for production functions."""

    def __call__(self, state: Any) -> Step:
        """Produce the next value from ``state``."""
        ...


class ObservationSink(Protocol):
    """Protocol for write-only observers of traversals."""

    def observe(self, event: TraversalEvent) -> None:
        """Receive one traversal event."""
        ...


class LoggerProtocol(Protocol):
    """Protocol for logging."""

    def info(self, message: str) -> None:
        """Log info message."""
        ...

    def debug(self, message: str) -> None:
        """Log debug message."""
        ...

    def warning(self, message: str) -> None:
        """Log warning message."""
        ...

    def error(self, message: str) -> None:
        """Log error message."""
        ...
