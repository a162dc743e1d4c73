"""Exceptions raised by lazy sequences and their traversals."""

from typing import Optional


class LazySequenceError(Exception):
    """Base class for lazy sequence errors."""


class ExhaustionError(LazySequenceError):
    """The producer failed and cannot continue.

    This is an abnormal end of a traversal. Normal completion is never
    reported with an exception other than ``StopIteration``.
    """

    def __init__(self, sequence: str, position: int, reason: Optional[str] = None):
        self.sequence = sequence
        self.position = position
        message = f"Producer of '{sequence}' faulted at position {position}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ReentrancyError(LazySequenceError, RuntimeError):
    """A traversal was asked for its next element while already producing one."""
