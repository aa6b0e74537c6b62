from __future__ import annotations

from typing import Iterator, Tuple

import numpy as np

from .particle import Particle


class BondedSequence:
    """
    Append-only record of bonded particles in bond order.

    Storage is preallocated for ``capacity`` elements and never reallocated,
    so the arrays a reader holds stay valid while the writer appends. Each
    element is fully written before the published length is advanced; a
    reader that observed length ``n`` can safely read elements ``[0, n)``.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self.capacity = int(capacity)
        self._x = np.zeros(self.capacity, dtype=np.int32)
        self._y = np.zeros(self.capacity, dtype=np.int32)
        self._colors = np.zeros((self.capacity, 3), dtype=np.uint8)
        self._length = 0

    def append(self, x: int, y: int, color: Tuple[int, int, int]) -> int:
        """Store a bonded particle and publish it. Returns the new length."""
        n = self._length
        if n >= self.capacity:
            raise IndexError(f"bonded sequence is full ({self.capacity} particles)")
        self._x[n] = x
        self._y[n] = y
        self._colors[n] = color
        self._length = n + 1
        return self._length

    def __len__(self) -> int:
        return self._length

    def __getitem__(self, index: int) -> Particle:
        n = self._length
        if index < 0:
            index += n
        if not 0 <= index < n:
            raise IndexError(f"bonded particle index {index} out of range (length {n})")
        color = tuple(int(c) for c in self._colors[index])
        return Particle.frozen(int(self._x[index]), int(self._y[index]), color)

    def __iter__(self) -> Iterator[Particle]:
        n = self._length
        for i in range(n):
            yield self[i]

    def positions(self) -> np.ndarray:
        """Copy of the bonded positions as an ``(n, 2)`` array."""
        n = self._length
        return np.column_stack((self._x[:n], self._y[:n]))

    def x_coords(self) -> np.ndarray:
        n = self._length
        view = self._x[:n]
        view.flags.writeable = False
        return view

    def y_coords(self) -> np.ndarray:
        n = self._length
        view = self._y[:n]
        view.flags.writeable = False
        return view

    def colors(self) -> np.ndarray:
        """Read-only ``(n, 3)`` uint8 view of bonded colours."""
        n = self._length
        view = self._colors[:n]
        view.flags.writeable = False
        return view

    def __repr__(self) -> str:
        return f"BondedSequence(length={self._length}, capacity={self.capacity})"
