"""
Example 01: Nothing Runs Until You Ask

Creating a LazySequence does not run its producer. The first call to
next() on a traversal builds the state and produces one value; each
following call produces exactly one more.
"""

from lazy_sequences import EXHAUSTED, LazySequence


def noisy_step(index):
    """Producer that announces every step."""
    if index >= 3:
        print("  (producer) nothing left")
        return EXHAUSTED
    print(f"  (producer) producing value {index}")
    return f"Lazy.{index}", index + 1


if __name__ == "__main__":
    print("Creating the sequence and a traversal (nothing printed yet!):")
    sequence = LazySequence.create(noisy_step, lambda: 0, name="noisy")
    traversal = sequence.traverse()
    print(f"  status = {traversal.status.value}")

    print("\nCalling next() - production starts:")
    print(f"  next(traversal) = {next(traversal)}")

    print("\nCalling next() again:")
    print(f"  next(traversal) = {next(traversal)}")

    print("\nDraining the rest:")
    for value in traversal:
        print(f"  got {value}")
    print(f"  status = {traversal.status.value}")

    print("\n✅ Lazy sequences only do work when a value is demanded!")
