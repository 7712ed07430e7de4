"""Terrarium exception hierarchy.

Configuration problems are raised at setup, before any frame is
stepped.  The per-frame update itself clamps all of its arithmetic and
has no recoverable error conditions.
"""


class TerrariumError(Exception):
    """Root of all Terrarium domain exceptions."""


class ConfigurationError(TerrariumError):
    """Invalid or inconsistent simulation parameters."""


class SimulationError(TerrariumError):
    """Errors while assembling or advancing a simulation."""
