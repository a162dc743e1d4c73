"""Ready-made lazy sequences used by the demos and examples."""

import logging
import time
from typing import Any, Dict, Iterable, Optional

from faker import Faker

from .models import EXHAUSTED, ProductionTally
from .sequence import LazySequence

logger = logging.getLogger(__name__)


def counter(
    prefix: str = "Lazy",
    total: Optional[int] = 3,
    tally: Optional[ProductionTally] = None,
    name: Optional[str] = None,
) -> LazySequence[str]:
    """Yield ``"{prefix}.0"``, ``"{prefix}.1"``, ... up to ``total`` values.

    The counter is the resume state, so every traversal starts again at 0.
    Each produced value is recorded in ``tally`` when one is given.

    Args:
        prefix: Text placed before the index
        total: Number of values, or None for an endless sequence
        tally: External counter of productions
        name: Sequence name (defaults to "<prefix>.counter")
    """
    if total is not None and total < 0:
        raise ValueError("total must be non-negative")

    def step(index: int):
        if total is not None and index >= total:
            return EXHAUSTED
        if tally is not None:
            tally.record()
        return f"{prefix}.{index}", index + 1

    return LazySequence(step, lambda: 0, name=name or f"{prefix}.counter")


def fifo(items: Iterable[Any], name: str = "list") -> LazySequence[Any]:
    """Yield ``items`` in insertion order (first in, first out)."""
    snapshot = tuple(items)

    def step(index: int):
        if index >= len(snapshot):
            return EXHAUSTED
        return snapshot[index], index + 1

    return LazySequence(step, lambda: 0, name=name)


def lifo(items: Iterable[Any], name: str = "stack") -> LazySequence[Any]:
    """Yield ``items`` as a stack would: last pushed comes out first."""
    snapshot = tuple(items)

    def step(index: int):
        if index < 0:
            return EXHAUSTED
        return snapshot[index], index - 1

    return LazySequence(step, lambda: len(snapshot) - 1, name=name)


def fake_records(
    total: int,
    seed: int = 42,
    tally: Optional[ProductionTally] = None,
    name: str = "fake_records",
) -> LazySequence[Dict[str, Any]]:
    """Yield ``total`` fake person records, generated on demand.

    Each traversal seeds its own Faker instance, so re-traversing
    regenerates exactly the same records (and does all the work again).
    """
    if total < 0:
        raise ValueError("total must be non-negative")

    def start():
        faker = Faker()
        faker.seed_instance(seed)
        return faker, 0

    def step(state):
        faker, index = state
        if index >= total:
            return EXHAUSTED
        if tally is not None:
            tally.record()
        record = {
            "id": index,
            "name": faker.name(),
            "email": faker.email(),
            "city": faker.city(),
        }
        return record, (faker, index + 1)

    return LazySequence(step, start, name=name)


def with_latency(sequence: LazySequence, seconds: float) -> LazySequence:
    """Wrap ``sequence`` so every production step blocks for ``seconds`` first.

    Only the traversal asking for the element waits.
    """
    if seconds < 0:
        raise ValueError("seconds must be non-negative")
    if seconds == 0:
        return sequence
    producer = sequence.producer

    def step(state):
        time.sleep(seconds)
        return producer(state)

    logger.debug(f"Adding {seconds:.2f}s latency to '{sequence.name}'")
    return LazySequence(
        step, sequence.initial_state, name=sequence.name, sink=sequence.sink
    )
