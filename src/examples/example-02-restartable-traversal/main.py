"""
Example 02: Every Traversal Starts Over

A plain generator is exhausted after one pass. A LazySequence hands out
a fresh traversal each time, which means the producer, and every side
effect in it, runs again. Materialize once if you need the values twice.
"""

from lazy_sequences import ProductionTally
from lazy_sequences.producers import counter


if __name__ == "__main__":
    tally = ProductionTally()
    sequence = counter(prefix="X", total=3, tally=tally)

    print("Two traversals of the lazy sequence:")
    print(f"  first:  {list(sequence)}  (productions so far: {tally.produced})")
    print(f"  second: {list(sequence)}  (productions so far: {tally.produced})")

    tally.reset()
    snapshot = sequence.materialize()

    print("\nTwo traversals of the materialized snapshot:")
    print(f"  first:  {list(snapshot.traverse())}  (productions so far: {tally.produced})")
    print(f"  second: {list(snapshot.traverse())}  (productions so far: {tally.produced})")

    print("\n✅ Lazy sequences recompute; materialized snapshots replay.")
