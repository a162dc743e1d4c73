"""Demonstrations of lazy versus materialized sequences.

Each demo builds its own sequences, consumes them the way the lesson
needs, and returns a ``DemoResult``: the consumed values, how many
productions the external tally had seen after each consumed value, and
the total number of productions.
"""

import logging
import string
from typing import Callable, List, Optional

from . import producers
from .config import DemoConfig
from .models import DemoResult, ProductionTally
from .protocols import ObservationSink
from .sequence import LazySequence, MaterializedSequence

logger = logging.getLogger(__name__)


def _letters(count: int) -> str:
    return string.ascii_uppercase[: min(count, len(string.ascii_uppercase))]


def _salted(
    config: DemoConfig, tally: ProductionTally, prefix: Optional[str] = None
) -> LazySequence[str]:
    """Counter sequence with the configured size and latency."""
    prefix = prefix or config.prefix
    sequence = producers.counter(prefix=prefix, total=config.item_count, tally=tally)
    return producers.with_latency(sequence, config.delay_seconds)


def _is_first(value: str) -> bool:
    return value.endswith(".0")


def the_basics(config: DemoConfig, sink: Optional[ObservationSink] = None) -> DemoResult:
    """A list and a lazy sequence iterate the same way."""
    letters = _letters(config.item_count)
    eager = MaterializedSequence([f"List.{letter}" for letter in letters], name="list")
    lazy = producers.fifo([f"{config.prefix}.{letter}" for letter in letters], name="lazy")

    result = DemoResult(name="the_basics")
    result.values.extend(eager.traverse())
    result.values.extend(lazy.traverse(sink))
    return result


def concrete_orderings(config: DemoConfig, sink: Optional[ObservationSink] = None) -> DemoResult:
    """Lists iterate first in, first out. Stacks iterate last in, first out."""
    letters = _letters(config.item_count)
    queue = producers.fifo([f"List.{letter}" for letter in letters], name="list")
    stack = producers.lifo([f"Stack.{letter}" for letter in letters], name="stack")

    result = DemoResult(name="concrete_orderings")
    result.values.extend(queue.traverse(sink))
    result.values.extend(stack.traverse(sink))
    return result


def fun_with_generators(config: DemoConfig, sink: Optional[ObservationSink] = None) -> DemoResult:
    """An eager list has done all its work up front; a lazy sequence works per element."""
    result = DemoResult(name="fun_with_generators")

    list_tally = ProductionTally()
    eager = _salted(config, list_tally, prefix="List").materialize(sink)
    for value in eager:
        result.values.append(value)
        result.tally_snapshots.append(list_tally.produced)

    lazy_tally = ProductionTally()
    for value in _salted(config, lazy_tally).traverse(sink):
        result.values.append(value)
        result.tally_snapshots.append(lazy_tally.produced)

    result.productions = list_tally.produced + lazy_tally.produced
    return result


def wonders_of_materialize(
    config: DemoConfig, sink: Optional[ObservationSink] = None
) -> DemoResult:
    """Materializing first runs the whole producer before the loop sees anything."""
    result = DemoResult(name="wonders_of_materialize")
    tally = ProductionTally()

    snapshot = _salted(config, tally).materialize(sink)
    for value in snapshot:
        result.values.append(value)
        result.tally_snapshots.append(tally.produced)

    result.productions = tally.produced
    return result


def lazy_early_exit(config: DemoConfig, sink: Optional[ObservationSink] = None) -> DemoResult:
    """Stopping early on a lazy sequence skips the remaining work."""
    result = DemoResult(name="lazy_early_exit")
    tally = ProductionTally()

    with _salted(config, tally).traverse(sink) as traversal:
        for value in traversal:
            result.values.append(value)
            result.tally_snapshots.append(tally.produced)
            if _is_first(value):
                break

    result.productions = tally.produced
    return result


def materialized_early_exit(
    config: DemoConfig, sink: Optional[ObservationSink] = None
) -> DemoResult:
    """Stopping early on a materialized sequence saves nothing: it is already computed."""
    result = DemoResult(name="materialized_early_exit")
    tally = ProductionTally()

    for value in _salted(config, tally).materialize(sink):
        result.values.append(value)
        result.tally_snapshots.append(tally.produced)
        if _is_first(value):
            break

    result.productions = tally.produced
    return result


def count_pitfall(config: DemoConfig, sink: Optional[ObservationSink] = None) -> DemoResult:
    """Counting a lazy sequence runs it fully, then iterating runs it again."""
    result = DemoResult(name="count_pitfall")
    tally = ProductionTally()
    sequence = _salted(config, tally)

    result.count = sequence.count(sink)
    logger.info(f"My count: {result.count}")
    for value in sequence.traverse(sink):
        result.values.append(value)
        result.tally_snapshots.append(tally.produced)

    result.productions = tally.produced
    return result


def caching_results(config: DemoConfig, sink: Optional[ObservationSink] = None) -> DemoResult:
    """Materialize once, then count and iterate the snapshot for free."""
    result = DemoResult(name="caching_results")
    tally = ProductionTally()

    snapshot = _salted(config, tally).materialize(sink)
    result.count = snapshot.count()
    logger.info(f"My count: {result.count}")
    for value in snapshot.traverse():
        result.values.append(value)
        result.tally_snapshots.append(tally.produced)

    result.productions = tally.produced
    return result


def replayed_records(config: DemoConfig, sink: Optional[ObservationSink] = None) -> DemoResult:
    """Re-traversing regenerates identical fake records and repeats all the work."""
    result = DemoResult(name="replayed_records")
    tally = ProductionTally()
    records = producers.fake_records(config.item_count, seed=config.seed, tally=tally)

    first = [record["name"] for record in records.traverse(sink)]
    second = [record["name"] for record in records.traverse(sink)]
    if first != second:
        logger.warning("Fake records differ between traversals")
    for name in first:
        result.values.append(name)
        result.tally_snapshots.append(tally.produced)

    result.count = len(first)
    result.productions = tally.produced
    return result


ALL_DEMOS: List[Callable[[DemoConfig, Optional[ObservationSink]], DemoResult]] = [
    the_basics,
    concrete_orderings,
    fun_with_generators,
    wonders_of_materialize,
    lazy_early_exit,
    materialized_early_exit,
    count_pitfall,
    caching_results,
    replayed_records,
]


def run_all(config: DemoConfig, sink: Optional[ObservationSink] = None) -> List[DemoResult]:
    """Run every demo in order and collect the results."""
    results = []
    for demo in ALL_DEMOS:
        logger.info("-" * 80)
        logger.info(f"{demo.__name__}: {demo.__doc__}")
        logger.info("-" * 80)
        result = demo(config, sink)
        logger.info(
            f"{demo.__name__} finished with {result.productions} productions "
            f"for {len(result.values)} consumed values"
        )
        results.append(result)
    return results
