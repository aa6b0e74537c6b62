import numpy as np
import pytest

from dla_growth import OccupancyGrid
from dla_growth.grid import is_occupied


def test_new_grid_is_empty():
    grid = OccupancyGrid(20)
    assert grid.cells.shape == (20, 20)
    assert grid.count() == 0
    assert not grid.occupied(0, 0)


def test_out_of_bounds_reads_false():
    grid = OccupancyGrid(10)
    grid.cells[:, :] = True
    for x, y in [(-1, 0), (0, -1), (10, 0), (0, 10), (-5, 50), (100, 100)]:
        assert grid.occupied(x, y) is False
    assert grid.occupied(9, 9) is True


def test_mark_sets_cell_once():
    grid = OccupancyGrid(10)
    grid.mark(3, 7)
    assert grid.occupied(3, 7)
    assert not grid.occupied(7, 3)
    assert grid.count() == 1

    with pytest.raises(ValueError, match="already occupied"):
        grid.mark(3, 7)
    with pytest.raises(ValueError, match="outside"):
        grid.mark(10, 0)


def test_any_occupied():
    grid = OccupancyGrid(10)
    grid.mark(5, 5)
    assert grid.any_occupied(np.array([[0, 0], [5, 5]]))
    assert not grid.any_occupied(np.array([[-1, 5], [4, 4], [20, 5]]))


def test_to_array_is_a_copy():
    grid = OccupancyGrid(5)
    grid.mark(1, 1)
    arr = grid.to_array()
    arr[2, 2] = True
    assert not grid.occupied(2, 2)
    assert arr[1, 1]


def test_compiled_lookup_matches_grid():
    grid = OccupancyGrid(8)
    grid.mark(0, 7)
    grid.mark(4, 4)
    for x in range(-2, 10):
        for y in range(-2, 10):
            assert bool(is_occupied(grid.cells, x, y)) == grid.occupied(x, y)


def test_invalid_size():
    with pytest.raises(ValueError):
        OccupancyGrid(0)
