"""
Mixed-radix counter (N-ary odometer).

Visits every index tuple of a vector of independent bases exactly once, in
a fixed order: the last digit varies fastest, like nested loops with the
first position outermost.
"""

from __future__ import annotations

import math
from collections.abc import Iterator, Sequence


class MixedRadixCounter:
    """
    Odometer over per-position bases.

    Usage:
        counter = MixedRadixCounter([2, 3])
        while True:
            visit(counter.current)
            if not counter.advance():
                break

    An empty base vector has exactly one (empty) combination; any zero base
    means there are no combinations at all.
    """

    def __init__(self, bases: Sequence[int]):
        for base in bases:
            if base < 0:
                raise ValueError(f"Counter bases must be non-negative, got {base}")
        self.bases = tuple(bases)
        self._digits = [0] * len(self.bases)
        self._exhausted = any(base == 0 for base in self.bases)

    @property
    def total(self) -> int:
        """Number of combinations the counter visits."""
        return math.prod(self.bases)

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    @property
    def current(self) -> tuple[int, ...]:
        """The current index tuple."""
        if self._exhausted:
            raise IndexError("Counter is exhausted")
        return tuple(self._digits)

    def advance(self) -> bool:
        """
        Step to the next combination.

        Increments the last digit; on overflow resets it and carries into the
        previous one.

        Returns:
            False once the carry propagates past the first digit
        """
        if self._exhausted:
            return False

        position = len(self._digits) - 1
        while position >= 0:
            self._digits[position] += 1
            if self._digits[position] < self.bases[position]:
                return True
            self._digits[position] = 0
            position -= 1

        self._exhausted = True
        return False

    def __iter__(self) -> Iterator[tuple[int, ...]]:
        """Yield every remaining combination, consuming the counter."""
        while not self._exhausted:
            yield self.current
            self.advance()


def combinations(bases: Sequence[int]) -> Iterator[tuple[int, ...]]:
    """Iterate over all index tuples for ``bases`` in odometer order."""
    return iter(MixedRadixCounter(bases))
