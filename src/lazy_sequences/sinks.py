"""Observation sinks: write-only receivers of traversal events."""

import logging
import sys
from typing import Any, List, Optional, TextIO

import pandas as pd

from .models import EventKind, TraversalEvent
from .protocols import LoggerProtocol, ObservationSink

EVENT_COLUMNS = ["sequence", "traversal_id", "kind", "position", "value"]


class EventLog:
    """
    Records every event in order.

    Single Responsibility: Keep an ordered, inspectable history of traversals.
    """

    def __init__(self):
        self.events: List[TraversalEvent] = []

    def observe(self, event: TraversalEvent) -> None:
        self.events.append(event)

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self):
        return iter(self.events)

    def of_kind(self, kind: EventKind) -> List[TraversalEvent]:
        """Return the events of one kind, in order."""
        return [event for event in self.events if event.kind is kind]

    def values(self, traversal_id: Optional[int] = None) -> List[Any]:
        """Return yielded values, optionally for a single traversal."""
        return [
            event.value
            for event in self.of_kind(EventKind.YIELDED)
            if traversal_id is None or event.traversal_id == traversal_id
        ]

    def kinds(self) -> List[str]:
        return [event.kind.value for event in self.events]

    def clear(self) -> None:
        self.events.clear()

    def to_dataframe(self) -> pd.DataFrame:
        """
        Convert the log to a pandas DataFrame, one row per event.

        Returns:
            DataFrame with sequence, traversal_id, kind, position and value columns
        """
        return pd.DataFrame(
            [event.to_dict() for event in self.events], columns=EVENT_COLUMNS
        )


class LoggingSink:
    """
    Forwards events to a logger.

    Faults are logged as warnings, everything else at debug level.
    """

    def __init__(self, logger: Optional[LoggerProtocol] = None):
        self._logger = logger or logging.getLogger(__name__)

    def observe(self, event: TraversalEvent) -> None:
        message = (
            f"[{event.sequence}#{event.traversal_id}] {event.kind.value} "
            f"at position {event.position}"
        )
        if event.kind is EventKind.YIELDED:
            message = f"{message}: {event.value!r}"
        if event.kind is EventKind.FAULTED:
            self._logger.warning(message)
        else:
            self._logger.debug(message)


class ConsoleSink:
    """Prints each yielded value on its own line."""

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream

    def observe(self, event: TraversalEvent) -> None:
        if event.kind is EventKind.YIELDED:
            print(f"  {event.value}", file=self._stream or sys.stdout)


class TeeSink:
    """Sends every event to several sinks, in the order given."""

    def __init__(self, *sinks: ObservationSink):
        self._sinks = sinks

    def observe(self, event: TraversalEvent) -> None:
        for sink in self._sinks:
            sink.observe(event)
