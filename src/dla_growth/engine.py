"""
On-lattice DLA growth engine.

Particles are spawned at uniformly random cells of a square domain and walk
one lattice step at a time (left, right, down or up) until they either leave
the inscribed disc, in which case they are discarded, or stand on a free
cell whose neighbourhood mask touches the cluster, in which case they bond.
Growth stops once the number of bonded particles reaches the target derived
from the fill percentage.

Key points:
1.  **Single generator:** all spawns and moves come from one engine-owned
    ``numpy.random.Generator``, so a seeded run is reproducible.
2.  **Batched walks:** move directions are drawn in batches and consumed by a
    compiled kernel (``@numba.njit(nogil=True)``), so a reader thread keeps
    running while a walk is in progress.
3.  **Cooperative cancellation:** the growth loop polls a
    ``threading.Event`` before each spawn and between direction batches.
"""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Mapping, Optional, Tuple

import numpy as np
from numba import njit

from .bonded import BondedSequence
from .colors import BLUE, CYAN, RGB, ColorLike, attachment_fraction, interpolate_color, to_rgb255
from .errors import EngineStateError, ParticleBondedError
from .grid import OccupancyGrid, is_occupied
from .particle import MOVES, Particle, mask_offsets

logger = logging.getLogger(__name__)

###############################################################################
# Constants
###############################################################################

DEFAULT_DIAMETER = 500
DEFAULT_CHUNK_SIZE = 1 << 16

# Kernel exit codes
WALKING = 0
ESCAPED = 1
BONDED = 2


def compute_target(fill_percentage: float, radius: int) -> int:
    """Number of bonded particles at which a run is complete."""
    return int((fill_percentage / 100.0) * math.pi * radius * radius)


def count_disc_cells(radius: int) -> int:
    """
    Number of lattice cells strictly inside the disc, i.e. the most particles
    that can ever bond. Slightly below pi * R**2 (196293 vs 196349 for R=250).
    """
    r = np.arange(-radius, radius + 1, dtype=np.int64)
    return int(np.count_nonzero(r[:, None] ** 2 + r[None, :] ** 2 < radius * radius))


###############################################################################
# Walk kernel
###############################################################################


@njit(cache=True, nogil=True)
def walk_kernel(
    cells: np.ndarray,
    x: int,
    y: int,
    centre: int,
    radius: int,
    offsets: np.ndarray,
    directions: np.ndarray,
    moves: np.ndarray,
) -> Tuple[int, int, int, int]:
    """
    Walk one particle through a batch of direction codes.

    After each unit step the particle is discarded if its squared distance
    from the centre is at least ``radius**2``; otherwise, if its own cell is
    free, the mask is scanned and the first occupied neighbour stops the walk.

    Returns:
        (status, x, y, consumed) where status is WALKING (batch exhausted),
        ESCAPED or BONDED and consumed is the number of directions used.
    """
    r_sq = radius * radius
    n_offsets = offsets.shape[0]
    for i in range(directions.shape[0]):
        k = directions[i]
        x += moves[k, 0]
        y += moves[k, 1]

        dx = x - centre
        dy = y - centre
        if dx * dx + dy * dy >= r_sq:
            return ESCAPED, x, y, i + 1

        if not is_occupied(cells, x, y):
            for j in range(n_offsets):
                if is_occupied(cells, x + offsets[j, 0], y + offsets[j, 1]):
                    return BONDED, x, y, i + 1

    return WALKING, x, y, directions.shape[0]


class _DirectionStream:
    """Batches of move directions drawn from the engine generator."""

    def __init__(self, rng: np.random.Generator, chunk_size: int) -> None:
        self.rng = rng
        self.chunk_size = chunk_size
        self._buffer = np.empty(0, dtype=np.int8)
        self._pos = 0

    def pending(self) -> np.ndarray:
        if self._pos >= self._buffer.shape[0]:
            self._buffer = self.rng.integers(0, 4, size=self.chunk_size, dtype=np.int8)
            self._pos = 0
        return self._buffer[self._pos :]

    def advance(self, n: int) -> None:
        self._pos += n


###############################################################################
# Configuration
###############################################################################


@dataclass
class GrowthConfig:
    """Domain geometry and the user-adjustable growth settings."""

    diameter: int = DEFAULT_DIAMETER
    first_color: RGB = CYAN
    second_color: RGB = BLUE
    mask_size: int = 4
    fill_percentage: float = 100.0
    draw_mask_enabled: bool = False
    seed: Optional[int] = None
    chunk_size: int = DEFAULT_CHUNK_SIZE

    def __post_init__(self) -> None:
        if self.diameter < 2:
            raise ValueError(f"diameter must be at least 2, got {self.diameter}")
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        _check_fill_percentage(self.fill_percentage)
        self.first_color = to_rgb255(self.first_color)
        self.second_color = to_rgb255(self.second_color)

    @classmethod
    def from_dict(cls, params: Mapping[str, Any]) -> "GrowthConfig":
        """Build a config from a parsed parameter file (see ``utils.load_params``)."""
        known = {f.name for f in fields(cls)}
        unknown = set(params) - known
        if unknown:
            raise TypeError(f"Unknown growth parameters: {', '.join(sorted(unknown))}")
        return cls(**params)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _check_fill_percentage(value: float) -> None:
    if not 0.0 <= value <= 100.0:
        raise ValueError(f"fill percentage must be within [0, 100], got {value}")


###############################################################################
# Engine
###############################################################################


class GrowthEngine:
    """
    Owns the occupancy grid and bonded sequence and runs the growth loop.

    Readers (e.g. a renderer) may poll ``bonded``, ``grid``, ``mask_size`` and
    ``draw_mask_enabled`` while a worker started with ``start()`` is running.
    Settings can be changed at any time; colour changes only affect particles
    that bond afterwards.
    """

    def __init__(self, config: GrowthConfig | None = None) -> None:
        self.config = config or GrowthConfig()

        self.diameter = self.config.diameter
        self.radius = self.diameter // 2
        self.centre = self.radius
        self.disc_cells = count_disc_cells(self.radius)

        self.target = compute_target(self.config.fill_percentage, self.radius)

        self._cancel = threading.Event()
        self._worker: Optional[threading.Thread] = None
        self._worker_error: Optional[BaseException] = None

        self.bonded = BondedSequence(self.disc_cells)
        self.grid = OccupancyGrid(self.diameter)

    # ------------------------------------------------------------------ config
    @property
    def first_color(self) -> RGB:
        return self.config.first_color

    @property
    def second_color(self) -> RGB:
        return self.config.second_color

    @property
    def mask_size(self) -> int:
        return self.config.mask_size

    @property
    def fill_percentage(self) -> float:
        return self.config.fill_percentage

    @property
    def draw_mask_enabled(self) -> bool:
        return self.config.draw_mask_enabled

    def set_first_color(self, color: ColorLike) -> None:
        self.config.first_color = to_rgb255(color)

    def set_second_color(self, color: ColorLike) -> None:
        self.config.second_color = to_rgb255(color)

    def set_mask_size(self, size: int) -> None:
        # Checked when the mask is looked up, not here.
        self.config.mask_size = size

    def set_fill_percentage(self, percentage: float) -> None:
        _check_fill_percentage(percentage)
        self.config.fill_percentage = percentage
        self.target = compute_target(percentage, self.radius)

    def set_draw_mask_enabled(self, enabled: bool) -> None:
        self.config.draw_mask_enabled = bool(enabled)

    def configure(
        self,
        *,
        first_color: ColorLike | None = None,
        second_color: ColorLike | None = None,
        mask_size: int | None = None,
        fill_percentage: float | None = None,
        draw_mask_enabled: bool | None = None,
    ) -> None:
        """Update any subset of the adjustable settings."""
        if first_color is not None:
            self.set_first_color(first_color)
        if second_color is not None:
            self.set_second_color(second_color)
        if mask_size is not None:
            self.set_mask_size(mask_size)
        if fill_percentage is not None:
            self.set_fill_percentage(fill_percentage)
        if draw_mask_enabled is not None:
            self.set_draw_mask_enabled(draw_mask_enabled)

    # ------------------------------------------------------------------ state
    def reset(self) -> None:
        """Drop the cluster: empty bonded sequence, all-free grid. Settings are kept."""
        if self.is_running:
            raise EngineStateError("cannot reset while the growth worker is running")
        self.bonded = BondedSequence(self.disc_cells)
        self.grid = OccupancyGrid(self.diameter)

    def in_disc(self, x: int, y: int) -> bool:
        dx = x - self.centre
        dy = y - self.centre
        return dx * dx + dy * dy < self.radius * self.radius

    def can_bond(self, particle: Particle) -> bool:
        """True if the particle is on a free cell with an occupied cell in its mask."""
        if self.grid.occupied(particle.x, particle.y):
            return False
        return self.grid.any_occupied(particle.mask(self.mask_size))

    def attach(self, particle: Particle) -> None:
        """
        Bond a particle: mark its cell, fix its colour and publish it.
        All checks run before the grid is touched, so a failed attach changes nothing.
        """
        if particle.bonded:
            raise ParticleBondedError(f"particle at {particle.position} is already bonded")
        if len(self.bonded) >= self.bonded.capacity:
            raise IndexError(f"bonded sequence is full ({self.bonded.capacity} particles)")
        if not self.in_disc(particle.x, particle.y):
            raise ValueError(f"cell {particle.position} is outside the disc")
        if self.grid.occupied(particle.x, particle.y):
            raise ValueError(f"cell {particle.position} is already occupied")
        index = len(self.bonded) + 1
        color = interpolate_color(
            self.first_color,
            self.second_color,
            attachment_fraction(index, self.target),
        )
        self.grid.mark(particle.x, particle.y)
        particle.bond(color)
        self.bonded.append(particle.x, particle.y, color)

    def snapshot(self) -> Dict[str, Any]:
        """Summary of the current cluster."""
        pos = self.bonded.positions().astype(np.float64)
        if pos.shape[0]:
            d = pos - float(self.centre)
            r_sq = np.einsum("ij,ij->i", d, d)
            r_max = float(np.sqrt(r_sq.max()))
            r_gyration = float(np.sqrt(r_sq.mean()))
        else:
            r_max = 0.0
            r_gyration = 0.0
        return {
            "mass": len(self.bonded),
            "target": self.target,
            "fill_percentage": self.fill_percentage,
            "mask_size": self.mask_size,
            "running": self.is_running,
            "r_max": r_max,
            "r_gyration": r_gyration,
        }

    # ------------------------------------------------------------------ run
    def run(self) -> int:
        """
        Grow the cluster until the target is reached or the run is cancelled.

        Returns the number of particles bonded by this call (seed included).
        """
        if len(self.bonded):
            raise EngineStateError("engine already holds a cluster; call reset() first")

        self.target = compute_target(self.fill_percentage, self.radius)
        rng = np.random.default_rng(self.config.seed)
        directions = _DirectionStream(rng, self.config.chunk_size)

        logger.info(
            "Running DLA growth: D=%d, target=%d, mask=%s, seed=%s",
            self.diameter, self.target, self.mask_size, self.config.seed,
        )

        if self.target > self.disc_cells:
            logger.warning(
                "Target %d exceeds the %d cells inside the disc; growth will stop when the disc is full",
                self.target, self.disc_cells,
            )

        self.attach(Particle(self.centre, self.centre))

        d = self.diameter
        report_every = max(1, self.target // 10)
        spawned = 0
        while len(self.bonded) < min(self.target, self.disc_cells):
            if self._cancel.is_set():
                logger.info("Growth cancelled at %d/%d particles", len(self.bonded), self.target)
                return len(self.bonded)

            particle = Particle(rng.integers(0, d), rng.integers(0, d))
            spawned += 1
            status = self._walk(particle, directions)
            if status is None:
                logger.info("Growth cancelled at %d/%d particles", len(self.bonded), self.target)
                return len(self.bonded)
            if status == BONDED:
                self.attach(particle)
                if len(self.bonded) % report_every == 0:
                    logger.debug(
                        "Bonded %d/%d (%d walkers spawned)",
                        len(self.bonded), self.target, spawned,
                    )

        logger.info(
            "Growth complete: %d particles bonded, %d walkers spawned",
            len(self.bonded), spawned,
        )
        return len(self.bonded)

    def _walk(self, particle: Particle, directions: _DirectionStream) -> Optional[int]:
        """Walk until the particle escapes or can bond; None if cancelled mid-walk."""
        x, y = particle.x, particle.y
        while True:
            offsets = mask_offsets(self.mask_size)
            status, x, y, used = walk_kernel(
                self.grid.cells, x, y, self.centre, self.radius,
                offsets, directions.pending(), MOVES,
            )
            directions.advance(used)
            if status != WALKING:
                particle.move_to(x, y)
                return status
            if self._cancel.is_set():
                return None

    # ------------------------------------------------------------------ worker
    @property
    def is_running(self) -> bool:
        return self._worker is not None and self._worker.is_alive()

    def start(self) -> threading.Thread:
        """
        Reset the engine and grow a new cluster on a background thread.
        An unjoined error from a previous worker was already logged and is dropped.
        """
        if self.is_running:
            raise EngineStateError("growth worker is already running")
        self._worker_error = None
        self.reset()
        self._cancel.clear()
        self._worker = threading.Thread(target=self._run_worker, name="dla-growth", daemon=True)
        self._worker.start()
        return self._worker

    def _run_worker(self) -> None:
        try:
            self.run()
        except Exception as exc:
            logger.exception("Growth worker failed")
            self._worker_error = exc

    def join(self, timeout: float | None = None) -> bool:
        """
        Wait for the worker to finish. Returns True if it has stopped.
        Re-raises any exception the worker ended with.
        """
        if self._worker is not None:
            self._worker.join(timeout)
        stopped = not self.is_running
        if stopped:
            self._raise_worker_error()
        return stopped

    def stop(self) -> None:
        """Ask the worker to stop and block until it has."""
        self._cancel.set()
        try:
            self.join()
        finally:
            self._cancel.clear()

    def clear(self) -> None:
        """Stop any running growth and drop the cluster, even if the worker failed."""
        try:
            self.stop()
        finally:
            self.reset()

    def _raise_worker_error(self) -> None:
        error, self._worker_error = self._worker_error, None
        if error is not None:
            raise error


__all__ = ["GrowthConfig", "GrowthEngine", "compute_target", "count_disc_cells", "walk_kernel"]
