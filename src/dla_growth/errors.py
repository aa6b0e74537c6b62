"""Exception types raised by the growth engine."""


class DLAError(Exception):
    """Base class for all dla_growth errors."""


class InvalidMaskSize(DLAError, ValueError):
    """Requested a neighbourhood mask size other than 4, 8, 12 or 16."""

    def __init__(self, size):
        self.size = size
        super().__init__(
            f"Unsupported mask size {size!r}; available mask sizes: 4, 8, 12, 16"
        )


class ParticleBondedError(DLAError):
    """Attempted to move or recolour a particle that has already bonded."""


class EngineStateError(DLAError, RuntimeError):
    """Operation not allowed in the engine's current run state."""
