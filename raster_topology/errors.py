"""
Exception hierarchy for raster topology operations.
"""


class TopologyError(Exception):
    """Base class for all raster topology errors."""


class InvalidDimensions(TopologyError, ValueError):
    """Grid is empty, ragged, or not two-dimensional."""


class OutOfRange(TopologyError, IndexError):
    """A grid coordinate falls outside [0, height) x [0, width)."""

    def __init__(self, row: int, col: int, height: int, width: int):
        self.row = row
        self.col = col
        super().__init__(
            f"Pixel ({row}, {col}) is outside a {height}x{width} grid"
        )


class InternalInvariantViolation(TopologyError, RuntimeError):
    """Contract violation inside the tracer. Not recoverable."""
