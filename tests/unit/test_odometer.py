"""
Tests for the mixed-radix counter.

Property-based tests compare the odometer against itertools.product, which
visits tuples in the same order (last position fastest).
"""

import itertools
import math

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from wgsl_variants.core.odometer import MixedRadixCounter, combinations


class TestOdometerProperties:
    @given(st.lists(st.integers(min_value=0, max_value=4), max_size=5))
    @settings(max_examples=200)
    def test_matches_itertools_product(self, bases: list[int]) -> None:
        """Invariant: same tuples, same order as nested loops."""
        expected = list(itertools.product(*(range(b) for b in bases)))
        assert list(combinations(bases)) == expected

    @given(st.lists(st.integers(min_value=0, max_value=4), max_size=5))
    def test_visits_total_distinct_tuples(self, bases: list[int]) -> None:
        """Invariant: exactly prod(bases) tuples, no duplicates."""
        counter = MixedRadixCounter(bases)
        visited = list(counter)
        assert len(visited) == counter.total == math.prod(bases)
        assert len(set(visited)) == len(visited)

    @given(st.lists(st.integers(min_value=1, max_value=4), min_size=1, max_size=5))
    def test_digits_stay_below_bases(self, bases: list[int]) -> None:
        for digits in combinations(bases):
            assert all(0 <= d < b for d, b in zip(digits, bases, strict=True))


class TestOdometerOrder:
    def test_second_position_varies_fastest(self):
        assert list(combinations([2, 3])) == [
            (0, 0),
            (0, 1),
            (0, 2),
            (1, 0),
            (1, 1),
            (1, 2),
        ]

    def test_manual_stepping(self):
        counter = MixedRadixCounter([2, 2])
        seen = []
        while True:
            seen.append(counter.current)
            if not counter.advance():
                break

        assert seen == [(0, 0), (0, 1), (1, 0), (1, 1)]
        assert counter.exhausted
        assert counter.advance() is False


class TestOdometerEdgeCases:
    def test_empty_bases_yield_one_empty_tuple(self):
        counter = MixedRadixCounter([])
        assert counter.total == 1
        assert list(counter) == [()]

    def test_zero_base_yields_nothing(self):
        counter = MixedRadixCounter([3, 0, 2])
        assert counter.total == 0
        assert counter.exhausted
        assert list(counter) == []

    def test_current_on_exhausted_counter(self):
        counter = MixedRadixCounter([0])
        with pytest.raises(IndexError):
            counter.current

    def test_negative_base_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            MixedRadixCounter([2, -1])
