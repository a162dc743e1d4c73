"""Lazy sequences with independent, restartable traversals.

A ``LazySequence`` is built from a production function and a factory for
its initial state. Nothing runs when the sequence is created. Every call
to ``traverse()`` returns a new ``Traversal`` that builds a fresh state on
the first demand and advances it one element at a time, so consuming the
same sequence twice runs the producer (and all of its side effects) twice.

``materialize()`` is the explicit way out: it runs one full traversal and
keeps the values in a ``MaterializedSequence`` that can be read any number
of times without touching the producer again.
"""

import itertools
import logging
from collections.abc import Sequence
from typing import Any, Callable, Generic, Iterable, Iterator, List, Optional, TypeVar

import pyarrow as pa

from .exceptions import ExhaustionError, LazySequenceError, ReentrancyError
from .models import EXHAUSTED, EventKind, TraversalEvent, TraversalState
from .protocols import ObservationSink, Producer

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")


def _no_state() -> None:
    return None


def _advance(iterator: Iterator[Any]):
    """Producer over a Python iterator used as the resume state."""
    try:
        value = next(iterator)
    except StopIteration:
        return EXHAUSTED
    return value, iterator


def _release(state: Any) -> None:
    """Close whatever a traversal state holds (generators, files, nested states)."""
    if isinstance(state, tuple):
        for item in state:
            _release(item)
        return
    close = getattr(state, "close", None)
    if callable(close):
        close()


class Traversal(Generic[T]):
    """A single cursor over a LazySequence.

    The traversal owns its resume state and moves through
    NOT_STARTED -> PRODUCING -> YIELDED -> PRODUCING ... until the producer
    reports EXHAUSTED, raises (FAULTED) or the consumer closes it early
    (ABANDONED). Terminal states only end this traversal; the parent
    sequence can always be traversed again.
    """

    def __init__(
        self,
        sequence: "LazySequence[T]",
        traversal_id: int,
        sink: Optional[ObservationSink] = None,
    ):
        self._sequence = sequence
        self.traversal_id = traversal_id
        self._sink = sink
        self._status = TraversalState.NOT_STARTED
        self._resume: Any = None
        self.position = 0

    @property
    def status(self) -> TraversalState:
        return self._status

    @property
    def sequence_name(self) -> str:
        return self._sequence.name

    def __iter__(self) -> "Traversal[T]":
        return self

    def __next__(self) -> T:
        if self._status is TraversalState.PRODUCING:
            raise ReentrancyError(
                f"Traversal {self.traversal_id} of '{self.sequence_name}' "
                f"is already producing"
            )
        if self._status.is_terminal:
            raise StopIteration

        starting = self._status is TraversalState.NOT_STARTED
        if starting:
            self._emit(EventKind.STARTED)
        self._status = TraversalState.PRODUCING

        try:
            if starting:
                self._resume = self._sequence.initial_state()
            step = self._sequence.producer(self._resume)
            if step is not EXHAUSTED:
                value, self._resume = step
        except LazySequenceError:
            self._fail()
            raise
        except Exception as e:
            self._fail()
            logger.warning(
                f"Producer of '{self.sequence_name}' faulted at position "
                f"{self.position}: {e!r}"
            )
            raise ExhaustionError(self.sequence_name, self.position, repr(e)) from e
        except BaseException:
            # KeyboardInterrupt, SystemExit: end the traversal, keep the exception
            self._fail()
            raise

        if step is EXHAUSTED:
            self._finish(TraversalState.EXHAUSTED, EventKind.EXHAUSTED)
            raise StopIteration

        self._status = TraversalState.YIELDED
        self._emit(EventKind.YIELDED, value)
        self.position += 1
        return value

    def close(self) -> None:
        """Abandon the traversal and release its state.

        Closing a finished traversal does nothing.
        """
        if self._status is TraversalState.PRODUCING:
            raise ReentrancyError(
                f"Cannot close traversal {self.traversal_id} of "
                f"'{self.sequence_name}' while it is producing"
            )
        if self._status.is_terminal:
            return
        logger.debug(
            f"Traversal {self.traversal_id} of '{self.sequence_name}' abandoned "
            f"after {self.position} values"
        )
        self._finish(TraversalState.ABANDONED, EventKind.ABANDONED)

    def __enter__(self) -> "Traversal[T]":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def _fail(self) -> None:
        self._finish(TraversalState.FAULTED, EventKind.FAULTED)

    def _finish(self, status: TraversalState, kind: EventKind) -> None:
        self._status = status
        resume, self._resume = self._resume, None
        try:
            _release(resume)
        finally:
            self._emit(kind)

    def _emit(self, kind: EventKind, value: Any = None) -> None:
        if self._sink is None:
            return
        self._sink.observe(
            TraversalEvent(
                sequence=self.sequence_name,
                traversal_id=self.traversal_id,
                kind=kind,
                position=self.position,
                value=value,
            )
        )

    def __repr__(self) -> str:
        return (
            f"Traversal(sequence={self.sequence_name!r}, id={self.traversal_id}, "
            f"status={self._status.value}, position={self.position})"
        )


class LazySequence(Generic[T]):
    """A deferred, restartable producer of values.

    Args:
        producer: Function called with the current resume state. Returns
            ``(value, next_state)`` or ``EXHAUSTED``.
        initial_state: Zero-argument factory called once per traversal, on
            the first demand, to build that traversal's own state.
        name: Name used in events, logs and errors
        sink: Default observation sink for traversals of this sequence
    """

    def __init__(
        self,
        producer: Producer,
        initial_state: Optional[Callable[[], Any]] = None,
        name: Optional[str] = None,
        sink: Optional[ObservationSink] = None,
    ):
        if not callable(producer):
            raise TypeError("producer must be callable")
        if initial_state is not None and not callable(initial_state):
            raise TypeError("initial_state must be a zero-argument callable")
        self._producer = producer
        self._initial_state = initial_state or _no_state
        self.name = name or getattr(producer, "__name__", "lazy_sequence")
        self._sink = sink
        self._traversal_ids = itertools.count(1)

    @classmethod
    def create(
        cls,
        producer: Producer,
        initial_state: Optional[Callable[[], Any]] = None,
        name: Optional[str] = None,
        sink: Optional[ObservationSink] = None,
    ) -> "LazySequence[T]":
        """Create a sequence. Neither argument is called here."""
        return cls(producer, initial_state, name=name, sink=sink)

    @classmethod
    def from_iterable(
        cls,
        factory: Callable[[], Iterable[T]],
        name: Optional[str] = None,
        sink: Optional[ObservationSink] = None,
    ) -> "LazySequence[T]":
        """Wrap a zero-argument callable returning an iterable, e.g. a generator function.

        The factory is called once per traversal, so a generator function
        gets a fresh generator (and fresh local state) every time.
        """
        return cls(
            _advance,
            lambda: iter(factory()),
            name=name or getattr(factory, "__name__", None),
            sink=sink,
        )

    @property
    def producer(self) -> Producer:
        return self._producer

    @property
    def initial_state(self) -> Callable[[], Any]:
        return self._initial_state

    @property
    def sink(self) -> Optional[ObservationSink]:
        return self._sink

    def traverse(self, sink: Optional[ObservationSink] = None) -> Traversal[T]:
        """Start a new, independent traversal from the beginning."""
        traversal = Traversal(self, next(self._traversal_ids), sink or self._sink)
        logger.debug(f"Created traversal {traversal.traversal_id} of '{self.name}'")
        return traversal

    def __iter__(self) -> Iterator[T]:
        return self.traverse()

    def materialize(self, sink: Optional[ObservationSink] = None) -> "MaterializedSequence[T]":
        """Run one full traversal now and keep every value.

        Raises:
            ExhaustionError: If the producer faults
        """
        with self.traverse(sink) as traversal:
            values = list(traversal)
        logger.debug(f"Materialized '{self.name}' into {len(values)} values")
        return MaterializedSequence(values, name=self.name)

    def count(self, sink: Optional[ObservationSink] = None) -> int:
        """Count the elements by running a full traversal and discarding the values.

        This costs exactly as much as ``materialize()``, and a later
        traversal runs the producer again from scratch.
        """
        total = 0
        with self.traverse(sink) as traversal:
            for _ in traversal:
                total += 1
        logger.debug(f"Counted {total} values in '{self.name}' (values discarded)")
        return total

    def take(self, n: int) -> "LazySequence[T]":
        """Lazy prefix of at most ``n`` elements.

        After ``n`` elements the underlying producer is not called again.
        """
        if n < 0:
            raise ValueError("n must be non-negative")
        producer = self._producer
        initial_state = self._initial_state

        def step(state):
            inner, remaining = state
            if remaining <= 0:
                return EXHAUSTED
            result = producer(inner)
            if result is EXHAUSTED:
                return EXHAUSTED
            value, next_inner = result
            return value, (next_inner, remaining - 1)

        return LazySequence(
            step, lambda: (initial_state(), n), name=f"{self.name}.take({n})", sink=self._sink
        )

    def map(self, fn: Callable[[T], U]) -> "LazySequence[U]":
        """Lazy element-wise transform, applied when each element is demanded."""
        producer = self._producer

        def step(state):
            result = producer(state)
            if result is EXHAUSTED:
                return EXHAUSTED
            value, next_state = result
            return fn(value), next_state

        fn_name = getattr(fn, "__name__", "fn")
        return LazySequence(
            step, self._initial_state, name=f"{self.name}.map({fn_name})", sink=self._sink
        )

    def __repr__(self) -> str:
        return f"LazySequence(name={self.name!r})"


class MaterializedSequence(Sequence, Generic[T]):
    """Immutable, fully computed snapshot of a LazySequence.

    Reading it never calls the producer it came from.
    """

    def __init__(self, values: Iterable[T], name: Optional[str] = None):
        self._values = tuple(values)
        self.name = name or "materialized"

    def __getitem__(self, index):
        if isinstance(index, slice):
            return MaterializedSequence(self._values[index], name=self.name)
        try:
            return self._values[index]
        except IndexError:
            raise IndexError(
                f"Index {index} out of range for '{self.name}' of length {len(self._values)}"
            ) from None

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[T]:
        return iter(self._values)

    def traverse(self) -> Iterator[T]:
        """Iterate the snapshot. Repeatable and free of side effects."""
        return iter(self._values)

    def count(self) -> int:  # type: ignore[override]
        return len(self._values)

    def to_list(self) -> List[T]:
        return list(self._values)

    def to_table(self) -> pa.Table:
        """Convert the snapshot to a PyArrow table with position and value columns."""
        return pa.table(
            {
                "position": pa.array(list(range(len(self._values))), type=pa.int64()),
                "value": list(self._values),
            }
        )

    def __eq__(self, other) -> bool:
        if isinstance(other, MaterializedSequence):
            return self._values == other._values
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"MaterializedSequence(name={self.name!r}, values={list(self._values)!r})"
