from __future__ import annotations

import numpy as np
from numba import njit


@njit(cache=True, nogil=True)
def is_occupied(cells: np.ndarray, x: int, y: int) -> bool:
    """
    Bounds-checked occupancy lookup.
    Positions outside the grid read as unoccupied so mask scans near the
    domain edge need no special casing.
    """
    if x < 0 or y < 0 or x >= cells.shape[0] or y >= cells.shape[1]:
        return False
    return cells[x, y]


class OccupancyGrid:
    """
    Square boolean matrix recording which lattice cells hold a bonded particle.

    A cell goes False -> True once, when a particle bonds there. Cells are
    never cleared; the engine swaps in a fresh grid on reset.
    """

    def __init__(self, size: int) -> None:
        if size <= 0:
            raise ValueError(f"grid size must be positive, got {size}")
        self.size = int(size)
        self.cells = np.zeros((self.size, self.size), dtype=np.bool_)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def occupied(self, x: int, y: int) -> bool:
        if not self.in_bounds(x, y):
            return False
        return bool(self.cells[x, y])

    def mark(self, x: int, y: int) -> None:
        if not self.in_bounds(x, y):
            raise ValueError(f"cell ({x}, {y}) is outside the {self.size}x{self.size} grid")
        if self.cells[x, y]:
            raise ValueError(f"cell ({x}, {y}) is already occupied")
        self.cells[x, y] = True

    def any_occupied(self, positions: np.ndarray) -> bool:
        """True if any of the ``(n, 2)`` absolute positions is occupied."""
        for x, y in positions:
            if self.occupied(int(x), int(y)):
                return True
        return False

    def count(self) -> int:
        return int(np.count_nonzero(self.cells))

    def to_array(self) -> np.ndarray:
        """Returns a copy of the boolean occupancy matrix."""
        return self.cells.copy()

    def __repr__(self) -> str:
        return f"OccupancyGrid(size={self.size}, occupied={self.count()})"
