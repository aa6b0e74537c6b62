"""
DLA Growth - on-lattice diffusion-limited aggregation in a bounded disc

This package provides:
- GrowthEngine: grows the cluster, optionally on a background worker thread
- GrowthConfig: domain size, colours, mask size and fill percentage
- OccupancyGrid / BondedSequence: the cluster state a renderer reads
- Particle and the 4/8/12/16 neighbourhood masks
"""

from .bonded import BondedSequence
from .colors import interpolate_color, to_rgb255
from .engine import GrowthConfig, GrowthEngine, compute_target, count_disc_cells
from .errors import DLAError, EngineStateError, InvalidMaskSize, ParticleBondedError
from .grid import OccupancyGrid
from .particle import MASK_SIZES, Particle, mask_offsets
from . import utils

__all__ = [
    # Engine
    "GrowthEngine",
    "GrowthConfig",
    "compute_target",
    "count_disc_cells",
    # State
    "OccupancyGrid",
    "BondedSequence",
    "Particle",
    "MASK_SIZES",
    "mask_offsets",
    # Colours
    "interpolate_color",
    "to_rgb255",
    # Errors
    "DLAError",
    "InvalidMaskSize",
    "ParticleBondedError",
    "EngineStateError",
    # Utilities
    "utils",
]
