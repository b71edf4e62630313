"""Tests for the position store"""

import pytest
import numpy as np
from driver_matching.errors import ConfigurationError, OutOfBounds, CellConflict
from driver_matching.spatial.store import PositionStore, EMPTY


class TestPositionStore:
    @pytest.fixture
    def store(self):
        return PositionStore(10, 10)

    def test_invalid_dimensions(self):
        with pytest.raises(ConfigurationError):
            PositionStore(0, 10)
        with pytest.raises(ConfigurationError):
            PositionStore(10, -1)

    def test_grid_starts_empty(self, store):
        assert store.cells.shape == (10, 10)
        assert (store.cells == EMPTY).all()
        assert len(store) == 0

    def test_upsert_and_lookup(self, store):
        assert store.upsert(7, 2, 3) is None

        assert store.position_of(7) == (2, 3)
        assert store.occupant_of(2, 3) == 7
        assert store.cells[2, 3] == 7
        assert 7 in store
        assert len(store) == 1

    def test_relocation_vacates_old_cell(self, store):
        store.upsert(7, 2, 3)
        assert store.upsert(7, 8, 9) == (2, 3)

        assert store.occupant_of(2, 3) is None
        assert store.occupant_of(8, 9) == 7
        assert store.position_of(7) == (8, 9)
        assert len(store) == 1

    def test_upsert_is_idempotent(self, store):
        store.upsert(7, 2, 3)
        store.upsert(7, 2, 3)

        assert store.position_of(7) == (2, 3)
        assert store.occupant_of(2, 3) == 7
        assert int((store.cells != EMPTY).sum()) == 1

    @pytest.mark.parametrize("x,y", [(-1, 0), (0, -1), (10, 0), (0, 10)])
    def test_out_of_bounds(self, store, x, y):
        with pytest.raises(OutOfBounds):
            store.upsert(1, x, y)
        assert len(store) == 0
        assert (store.cells == EMPTY).all()

    def test_conflict_leaves_store_untouched(self, store):
        store.upsert(1, 1, 1)
        with pytest.raises(CellConflict) as exc:
            store.upsert(2, 1, 1)

        assert exc.value.occupant_id == 1
        assert exc.value.agent_id == 2
        assert store.occupant_of(1, 1) == 1
        assert 2 not in store
        assert len(store) == 1

    def test_conflict_on_relocation_keeps_old_cell(self, store):
        store.upsert(1, 1, 1)
        store.upsert(2, 2, 2)

        with pytest.raises(CellConflict):
            store.upsert(2, 1, 1)

        assert store.position_of(2) == (2, 2)
        assert store.occupant_of(2, 2) == 2
        assert store.occupant_of(1, 1) == 1

    def test_non_positive_id_rejected(self, store):
        with pytest.raises(ValueError):
            store.upsert(0, 1, 1)
        with pytest.raises(ValueError):
            store.upsert(-1, 1, 1)

    def test_remove(self, store):
        store.upsert(1, 4, 4)

        assert store.remove(1)
        assert not store.remove(1)
        assert not store.remove(42)
        assert store.occupant_of(4, 4) is None

        # Vacated cell is immediately reusable
        store.upsert(2, 4, 4)
        assert store.occupant_of(4, 4) == 2

    def test_occupant_of_outside_grid(self, store):
        assert store.occupant_of(-1, 5) is None
        assert store.occupant_of(5, 100) is None

    def test_arrays_snapshot(self, store):
        store.upsert(1, 1, 2)
        store.upsert(2, 3, 4)

        ids, xs, ys = store.arrays()
        got = sorted(zip(ids.tolist(), xs.tolist(), ys.tolist()))
        assert got == [(1, 1, 2), (2, 3, 4)]

    def test_arrays_empty(self, store):
        ids, xs, ys = store.arrays()
        assert len(ids) == len(xs) == len(ys) == 0

    def test_non_square_grid_indexing(self):
        store = PositionStore(3, 7)
        store.upsert(5, 2, 6)

        assert store.cells[2, 6] == 5
        assert store.occupant_of(2, 6) == 5
        assert np.count_nonzero(store.cells != EMPTY) == 1
