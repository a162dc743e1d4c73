"""
Example 04: Walking Away Early

A consumer can stop at any point. Leaving the with-block closes the
traversal, which releases its state and runs any cleanup the producer
registered. The sequence itself can be traversed again afterwards.
"""

from lazy_sequences import EventLog, LazySequence


def readings():
    """Endless generator holding a pretend resource."""
    print("  Acquiring resource")
    try:
        n = 0
        while True:
            yield f"reading.{n}"
            n += 1
    finally:
        print("  Releasing resource")


if __name__ == "__main__":
    log = EventLog()
    sequence = LazySequence.from_iterable(readings, sink=log)

    print("Taking readings until we have enough:")
    with sequence.traverse() as traversal:
        for value in traversal:
            print(f"  {value}")
            if value.endswith(".2"):
                break

    print(f"\nTraversal status: {traversal.status.value}")
    print(f"Events: {log.kinds()}")

    print("\nThe sequence is still usable:")
    print(f"  {list(sequence.take(2))}")

    print("\n✅ Abandoning a traversal is always safe!")
