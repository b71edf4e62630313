"""Tests for distance metric and top-5 selection"""

import pytest
import numpy as np
from driver_matching.spatial.distance import (
    squared_euclidean,
    squared_euclidean_many,
    point_rect_squared_distance,
)
from driver_matching.spatial.topk import NearestResult, TopKSelector, K, UNBOUNDED


class TestDistance:
    def test_squared_euclidean(self):
        assert squared_euclidean(0, 0, 3, 4) == 25
        assert squared_euclidean(3, 4, 0, 0) == 25
        assert squared_euclidean(7, 7, 7, 7) == 0

    def test_no_overflow_on_int32_inputs(self):
        a = np.int32(100000)
        b = np.int32(-100000)
        # 200000^2 * 2 does not fit in 32 bits
        assert squared_euclidean(a, a, b, b) == 2 * 200000 ** 2

    def test_vectorized_matches_scalar(self):
        xs = np.array([0, 5, 100000], dtype=np.int32)
        ys = np.array([0, -5, 100000], dtype=np.int32)
        d2 = squared_euclidean_many(1, 2, xs, ys)

        assert d2.dtype == np.int64
        assert d2.tolist() == [squared_euclidean(1, 2, x, y) for x, y in zip(xs, ys)]

    def test_point_rect_distance(self):
        # Inside
        assert point_rect_squared_distance(5, 5, 0, 0, 7, 7) == 0
        # Left of rectangle
        assert point_rect_squared_distance(-3, 4, 0, 0, 7, 7) == 9
        # Diagonal from a corner
        assert point_rect_squared_distance(10, 10, 0, 0, 7, 7) == 18


class TestTopKSelector:
    def test_empty(self):
        top = TopKSelector()
        assert len(top) == 0
        assert top.worst_distance_or_sentinel() == UNBOUNDED
        assert top.drain_sorted() == []

    def test_sorted_when_partial(self):
        top = TopKSelector()
        top.add(NearestResult(30, 3, 3, 18))
        top.add(NearestResult(10, 1, 1, 2))
        top.add(NearestResult(20, 2, 2, 8))

        assert not top.is_full
        assert top.worst_distance_or_sentinel() == UNBOUNDED
        assert [r.id for r in top.drain_sorted()] == [10, 20, 30]

    def test_tie_break_by_id(self):
        top = TopKSelector()
        top.add(NearestResult(2, 1, 0, 1))
        top.add(NearestResult(1, 0, 1, 1))

        assert [r.id for r in top.drain_sorted()] == [1, 2]

    def test_keeps_five_best(self):
        top = TopKSelector()
        for i in range(10, 0, -1):
            top.add(NearestResult(i, i, 0, i * i))

        assert top.is_full
        assert top.worst_distance_or_sentinel() == 25
        assert [r.id for r in top.drain_sorted()] == [1, 2, 3, 4, 5]

    def test_full_requires_strictly_better(self):
        top = TopKSelector()
        for i in range(1, K + 1):
            top.add(NearestResult(i * 10, 0, 0, i))

        # Same distance as worst, larger id: rejected
        assert not top.add(NearestResult(99, 0, 0, 5))
        # Same distance as worst, smaller id: replaces it
        assert top.add(NearestResult(1, 0, 0, 5))

        results = top.drain_sorted()
        assert [r.id for r in results] == [10, 20, 30, 40, 1]
        assert [r.dist2 for r in results] == [1, 2, 3, 4, 5]

    def test_drain_empties(self):
        top = TopKSelector()
        top.add(NearestResult(1, 0, 0, 0))
        assert len(top.drain_sorted()) == 1
        assert len(top) == 0

    def test_result_is_value_object(self):
        a = NearestResult(1, 2, 3, 13)
        b = NearestResult(1, 2, 3, 13)
        assert a == b
        assert a.to_dict() == {'id': 1, 'x': 2, 'y': 3, 'dist2': 13}
        with pytest.raises(AttributeError):
            a.dist2 = 0
