"""Tests for sequence module."""

import pytest

from lazy_sequences.exceptions import ExhaustionError, ReentrancyError
from lazy_sequences.models import EXHAUSTED, EventKind, TraversalState
from lazy_sequences.sequence import LazySequence
from lazy_sequences.sinks import EventLog


def salted(prefix, total, calls):
    """Counter producer that appends every production to ``calls``."""

    def step(index):
        if index >= total:
            return EXHAUSTED
        calls.append(index)
        return f"{prefix}.{index}", index + 1

    return LazySequence.create(step, lambda: 0, name=prefix)


def test_create_does_not_invoke_producer():
    """Test that creating a sequence and a traversal runs nothing."""
    calls = []

    def start():
        calls.append("start")
        return 0

    def step(index):
        calls.append(index)
        return EXHAUSTED

    sequence = LazySequence.create(step, start)
    traversal = sequence.traverse()

    assert calls == []
    assert traversal.status is TraversalState.NOT_STARTED


def test_traverse_yields_in_production_order():
    """Test that elements come out exactly in the order they are produced."""
    calls = []
    sequence = salted("X", 3, calls)

    assert list(sequence.traverse()) == ["X.0", "X.1", "X.2"]
    assert calls == [0, 1, 2]


def test_traversal_suspends_between_elements():
    """Test that each demand runs exactly one production step."""
    calls = []
    traversal = salted("X", 3, calls).traverse()

    assert next(traversal) == "X.0"
    assert calls == [0]
    assert traversal.status is TraversalState.YIELDED
    assert next(traversal) == "X.1"
    assert calls == [0, 1]


def test_repeated_traversal_repeats_side_effects():
    """Test that two traversals each run the producer from the same start."""
    calls = []
    sequence = salted("X", 3, calls)

    first = list(sequence)
    second = list(sequence)

    assert first == ["X.0", "X.1", "X.2"]
    assert second == ["X.0", "X.1", "X.2"]
    assert calls == [0, 1, 2, 0, 1, 2]


def test_interleaved_traversals_are_independent():
    """Test that two open traversals keep separate cursors."""
    calls = []
    sequence = salted("X", 3, calls)
    a = sequence.traverse()
    b = sequence.traverse()

    assert next(a) == "X.0"
    assert next(a) == "X.1"
    assert next(b) == "X.0"
    assert next(a) == "X.2"
    assert a.traversal_id != b.traversal_id


def test_exhausted_traversal_stays_exhausted():
    """Test that an exhausted traversal keeps raising StopIteration."""
    traversal = salted("X", 1, []).traverse()

    assert list(traversal) == ["X.0"]
    assert traversal.status is TraversalState.EXHAUSTED
    with pytest.raises(StopIteration):
        next(traversal)


def test_materialize_runs_producer_once():
    """Test that a materialized snapshot is replayed without re-running the producer."""
    calls = []
    snapshot = salted("X", 3, calls).materialize()

    assert calls == [0, 1, 2]
    assert snapshot.count() == 3
    assert list(snapshot.traverse()) == ["X.0", "X.1", "X.2"]
    assert list(snapshot.traverse()) == ["X.0", "X.1", "X.2"]
    assert calls == [0, 1, 2]


def test_count_runs_every_side_effect_and_keeps_nothing():
    """Test that count() traverses fully and a later traversal starts over."""
    calls = []
    sequence = salted("X", 3, calls)

    assert sequence.count() == 3
    assert calls == [0, 1, 2]

    assert list(sequence) == ["X.0", "X.1", "X.2"]
    assert calls == [0, 1, 2, 0, 1, 2]


def test_early_abandon_runs_only_consumed_productions():
    """Test that stopping after K elements costs exactly K productions."""
    calls = []
    sequence = salted("X", 10, calls)

    with sequence.traverse() as traversal:
        for value in traversal:
            if value == "X.1":
                break

    assert calls == [0, 1]
    assert traversal.status is TraversalState.ABANDONED


def test_close_releases_generator_state():
    """Test that closing a generator-backed traversal runs its finally block."""
    released = []

    def resource():
        try:
            while True:
                yield "data"
        finally:
            released.append(True)

    traversal = LazySequence.from_iterable(resource).traverse()
    assert next(traversal) == "data"

    traversal.close()

    assert released == [True]
    with pytest.raises(StopIteration):
        next(traversal)


def test_close_before_start_does_not_run_producer():
    """Test that abandoning an unstarted traversal never touches the producer."""
    calls = []
    traversal = salted("X", 3, calls).traverse()

    traversal.close()
    traversal.close()

    assert calls == []
    assert traversal.status is TraversalState.ABANDONED


def test_infinite_sequence_can_be_consumed_partially():
    """Test that an endless producer is fine as long as the consumer stops."""

    def step(n):
        return n, n + 1

    traversal = LazySequence(step, lambda: 0).traverse()
    assert [next(traversal) for _ in range(5)] == [0, 1, 2, 3, 4]
    traversal.close()


def test_fault_surfaces_as_exhaustion_error():
    """Test that a producer exception ends the traversal with ExhaustionError."""

    def step(index):
        if index == 2:
            raise OSError("disk on fire")
        return index, index + 1

    sequence = LazySequence(step, lambda: 0, name="flaky")
    traversal = sequence.traverse()

    assert next(traversal) == 0
    assert next(traversal) == 1
    with pytest.raises(ExhaustionError, match="flaky") as excinfo:
        next(traversal)

    assert isinstance(excinfo.value.__cause__, OSError)
    assert excinfo.value.position == 2
    assert traversal.status is TraversalState.FAULTED
    with pytest.raises(StopIteration):
        next(traversal)


def test_fault_does_not_corrupt_sequence():
    """Test that a fresh traversal after a fault starts from the initial state."""
    attempts = []

    def step(index):
        if index == 1 and len(attempts) == 0:
            attempts.append("failed")
            raise ValueError("transient")
        if index >= 3:
            return EXHAUSTED
        return index, index + 1

    sequence = LazySequence(step, lambda: 0)

    with pytest.raises(ExhaustionError):
        sequence.materialize()

    assert sequence.materialize().to_list() == [0, 1, 2]


def test_initial_state_fault_is_exhaustion_error():
    """Test that a failing state factory is reported as a fault at position 0."""

    def start():
        raise RuntimeError("no state")

    sequence = LazySequence(lambda state: EXHAUSTED, start)

    with pytest.raises(ExhaustionError) as excinfo:
        sequence.count()

    assert excinfo.value.position == 0


def test_malformed_step_is_exhaustion_error():
    """Test that a producer returning something other than a pair faults."""
    sequence = LazySequence(lambda state: "oops", name="malformed")

    with pytest.raises(ExhaustionError, match="malformed"):
        list(sequence)


def test_reentry_raises_reentrancy_error():
    """Test that a producer asking its own traversal for more is rejected."""
    holder = {}

    def step(index):
        if index == 1:
            next(holder["traversal"])
        return index, index + 1

    holder["traversal"] = LazySequence(step, lambda: 0).traverse()
    traversal = holder["traversal"]

    assert next(traversal) == 0
    with pytest.raises(ReentrancyError):
        next(traversal)
    assert traversal.status is TraversalState.FAULTED


def test_take_stops_calling_producer():
    """Test that take() never produces more than it yields."""
    calls = []
    sequence = salted("X", 10, calls).take(3)

    assert list(sequence) == ["X.0", "X.1", "X.2"]
    assert calls == [0, 1, 2]


def test_take_more_than_available():
    """Test that take() over a short sequence yields everything there is."""
    assert list(salted("X", 2, []).take(5)) == ["X.0", "X.1"]


def test_take_rejects_negative():
    """Test that take() with a negative count raises ValueError."""
    with pytest.raises(ValueError, match="non-negative"):
        salted("X", 2, []).take(-1)


def test_map_is_lazy():
    """Test that map() applies its function only on demand."""
    calls = []
    mapped = []

    def shout(value):
        mapped.append(value)
        return value.upper()

    sequence = salted("x", 3, calls).map(shout)
    assert mapped == []

    traversal = sequence.traverse()
    assert next(traversal) == "X.0"
    assert mapped == ["x.0"]
    assert calls == [0]


def test_from_iterable_calls_factory_per_traversal():
    """Test that each traversal gets a fresh generator with fresh locals."""
    runs = []

    def generate():
        y = 0
        runs.append("run")
        for _ in range(3):
            yield f"Gen.{y}"
            y += 1

    sequence = LazySequence.from_iterable(generate)
    assert runs == []

    assert list(sequence) == ["Gen.0", "Gen.1", "Gen.2"]
    assert list(sequence) == ["Gen.0", "Gen.1", "Gen.2"]
    assert runs == ["run", "run"]


def test_events_reported_to_sink():
    """Test that a traversal reports its lifecycle to the observation sink."""
    log = EventLog()
    sequence = salted("X", 2, [])

    list(sequence.traverse(log))

    assert log.kinds() == ["started", "yielded", "yielded", "exhausted"]
    assert log.values() == ["X.0", "X.1"]
    assert [event.position for event in log.of_kind(EventKind.YIELDED)] == [0, 1]


def test_default_sink_used_when_none_given():
    """Test that the sequence-level sink receives events."""
    log = EventLog()

    def step(index):
        return (index, index + 1) if index < 1 else EXHAUSTED

    sequence = LazySequence(step, lambda: 0, sink=log)
    sequence.count()

    assert log.kinds() == ["started", "yielded", "exhausted"]


def test_producer_must_be_callable():
    """Test that a non-callable producer is rejected."""
    with pytest.raises(TypeError, match="callable"):
        LazySequence("not a function")


def test_interrupt_in_producer_ends_traversal():
    """Test that KeyboardInterrupt from a producer propagates and leaves the traversal closable."""

    def step(index):
        if index == 1:
            raise KeyboardInterrupt
        return index, index + 1

    sequence = LazySequence(step, lambda: 0)

    with pytest.raises(KeyboardInterrupt):
        sequence.materialize()

    traversal = sequence.traverse()
    assert next(traversal) == 0
    with pytest.raises(KeyboardInterrupt):
        next(traversal)

    assert traversal.status is TraversalState.FAULTED
    traversal.close()
    with pytest.raises(StopIteration):
        next(traversal)


def test_sink_failure_is_not_a_producer_fault():
    """Test that an error raised by the sink is not reported as ExhaustionError."""
    calls = []

    class BrokenSink:
        def observe(self, event):
            raise LookupError("sink down")

    traversal = salted("X", 3, calls).traverse(BrokenSink())

    with pytest.raises(LookupError, match="sink down"):
        next(traversal)

    assert calls == []
    assert traversal.status is TraversalState.NOT_STARTED
