"""
Particles and neighbourhood masks.

A particle is a walker on the integer lattice. While it is free it can be
moved and recoloured; once it bonds to the cluster its position and colour
are frozen.

Masks are constant tables of relative offsets used to decide whether a
walker is close enough to the cluster to bond. Each larger mask contains all
offsets of the smaller ones:

    4  : the four axis neighbours
    8  : + the four diagonals
    12 : + the four axis cells at distance 2
    16 : + the four diagonal cells at distance 2
"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from .errors import InvalidMaskSize, ParticleBondedError

###############################################################################
# Move and mask tables
###############################################################################

# Direction codes 0..3 -> left, right, down, up
MOVES = np.array(
    [
        [-1, 0],
        [1, 0],
        [0, -1],
        [0, 1],
    ],
    dtype=np.int64,
)

_AXIS_1 = [(-1, 0), (1, 0), (0, -1), (0, 1)]
_DIAG_1 = [(1, 1), (1, -1), (-1, 1), (-1, -1)]
_AXIS_2 = [(-2, 0), (2, 0), (0, -2), (0, 2)]
_DIAG_2 = [(2, 2), (2, -2), (-2, 2), (-2, -2)]


def _build_mask_tables():
    # Newest ring first, then the next smaller mask.
    rings = {4: _AXIS_1, 8: _DIAG_1, 12: _AXIS_2, 16: _DIAG_2}
    tables = {}
    previous: list = []
    for size in sorted(rings):
        offsets = list(rings[size]) + previous
        table = np.array(offsets, dtype=np.int64)
        table.setflags(write=False)
        tables[size] = table
        previous = offsets
    return tables


MASK_TABLES = _build_mask_tables()
MASK_SIZES = tuple(sorted(MASK_TABLES))


def mask_offsets(size: int) -> np.ndarray:
    """Return the read-only ``(size, 2)`` offset table for a mask size."""
    try:
        return MASK_TABLES[size]
    except (KeyError, TypeError):
        raise InvalidMaskSize(size) from None


###############################################################################
# Particle
###############################################################################


class Particle:
    """A lattice walker that freezes once it bonds to the cluster."""

    __slots__ = ("_x", "_y", "_color", "_bonded")

    def __init__(
        self, x: int, y: int, color: Optional[Tuple[int, int, int]] = None
    ) -> None:
        self._x = int(x)
        self._y = int(y)
        self._color = color
        self._bonded = False

    @classmethod
    def frozen(cls, x: int, y: int, color: Tuple[int, int, int]) -> "Particle":
        """Build an already-bonded particle."""
        particle = cls(x, y)
        particle.bond(color)
        return particle

    @property
    def x(self) -> int:
        return self._x

    @property
    def y(self) -> int:
        return self._y

    @property
    def position(self) -> Tuple[int, int]:
        return self._x, self._y

    @property
    def bonded(self) -> bool:
        return self._bonded

    @property
    def color(self) -> Optional[Tuple[int, int, int]]:
        return self._color

    @color.setter
    def color(self, value: Tuple[int, int, int]) -> None:
        if self._bonded:
            raise ParticleBondedError(
                f"particle at {self.position} is bonded; its colour is fixed"
            )
        self._color = value

    def move_to(self, x: int, y: int) -> None:
        if self._bonded:
            raise ParticleBondedError(f"particle at {self.position} is bonded")
        self._x = int(x)
        self._y = int(y)

    def random_move(self, rng: np.random.Generator) -> None:
        """Take one unit step left, right, down or up with equal probability."""
        dx, dy = MOVES[rng.integers(0, 4)]
        self.move_to(self._x + dx, self._y + dy)

    def mask(self, size: int) -> np.ndarray:
        """Absolute ``(size, 2)`` neighbour positions around this particle."""
        return mask_offsets(size) + np.array([self._x, self._y], dtype=np.int64)

    def bond(self, color: Tuple[int, int, int]) -> None:
        """Fix the colour and freeze the particle."""
        self.color = color
        self._bonded = True

    def __repr__(self) -> str:
        state = "bonded" if self._bonded else "free"
        return f"Particle(x={self._x}, y={self._y}, color={self._color}, {state})"
