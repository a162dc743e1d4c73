"""
Example 03: Counting Is Not Free

count() on a lazy sequence has to run the whole producer to find the
answer, then throws the values away. Iterating afterwards pays again.
"""

import time

from lazy_sequences import ProductionTally
from lazy_sequences.producers import counter, with_latency


if __name__ == "__main__":
    tally = ProductionTally()
    sequence = with_latency(counter(prefix="Lazy", total=3, tally=tally), 0.5)

    start = time.perf_counter()
    print(f"My count: {sequence.count()}")
    for value in sequence:
        print(f"  {value}")
    lazy_time = time.perf_counter() - start
    print(f"Lazy: {tally.produced} productions in {lazy_time:.2f}s")

    tally.reset()
    start = time.perf_counter()
    snapshot = sequence.materialize()
    print(f"\nMy count: {snapshot.count()}")
    for value in snapshot:
        print(f"  {value}")
    cached_time = time.perf_counter() - start
    print(f"Materialized: {tally.produced} productions in {cached_time:.2f}s")

    print("\n✅ Materialize before counting if you also need the values!")
