"""
Bounds-checked 2-D pixel buffer shared by the labeler and the contour tracer.

Storage is a row-major numpy array. Every access goes through a bounds check:
``get``/``set`` raise OutOfRange, ``try_get`` returns None so border probes
can treat the outside of the grid as background.
"""

from typing import Any, Optional, Tuple, Union
import logging

import numpy as np

from .errors import InvalidDimensions, OutOfRange

logger = logging.getLogger(__name__)

Point = Tuple[int, int]  # (row, col)


class PixelGrid:
    """
    Row-major grid of small integers.

    Attributes:
        height: Number of rows
        width: Number of columns
        data: Underlying 2-D numpy array (shape ``(height, width)``)
    """

    def __init__(self, height: int, width: int, fill: int = 0, dtype=np.int32):
        if height < 0 or width < 0:
            raise InvalidDimensions(f"Grid dimensions must be >= 0, got {height}x{width}")
        self._data = np.full((height, width), fill, dtype=dtype)

    @classmethod
    def from_array(cls, array: Any, dtype=None) -> "PixelGrid":
        """
        Build a grid from a 2-D numpy array or nested lists.

        The data is copied, so the caller's buffer is never touched.

        Raises:
            InvalidDimensions: input is ragged or not two-dimensional
        """
        try:
            data = np.array(array, dtype=dtype)
        except ValueError as e:
            raise InvalidDimensions(f"Grid rows have inconsistent lengths: {e}") from e

        if data.dtype == object:
            raise InvalidDimensions("Grid rows have inconsistent lengths")
        if data.ndim != 2:
            if data.size == 0:
                data = data.reshape(0, 0)
            else:
                raise InvalidDimensions(f"Expected a 2-D grid, got {data.ndim} dimension(s)")
        if data.dtype == bool:
            data = data.astype(np.int32)

        grid = cls.__new__(cls)
        grid._data = data
        return grid

    @classmethod
    def coerce(cls, obj: Union["PixelGrid", Any]) -> "PixelGrid":
        """Return ``obj`` if it already is a PixelGrid, else wrap a copy of it."""
        if isinstance(obj, PixelGrid):
            return obj
        return cls.from_array(obj)

    # Properties
    @property
    def data(self) -> np.ndarray:
        return self._data

    @property
    def height(self) -> int:
        return self._data.shape[0]

    @property
    def width(self) -> int:
        return self._data.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return self._data.shape

    @property
    def size(self) -> int:
        return int(self._data.size)

    @property
    def is_empty(self) -> bool:
        return self._data.size == 0

    # Access
    def contains(self, row: int, col: int) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def get(self, row: int, col: int) -> int:
        if not self.contains(row, col):
            raise OutOfRange(row, col, self.height, self.width)
        return self._data[row, col].item()

    def try_get(self, row: int, col: int) -> Optional[int]:
        """Like ``get`` but returns None outside the grid."""
        if not self.contains(row, col):
            return None
        return self._data[row, col].item()

    def __getitem__(self, point: Point) -> int:
        return self.get(*point)

    # Mutators
    def set(self, row: int, col: int, value: int) -> None:
        if not self.contains(row, col):
            raise OutOfRange(row, col, self.height, self.width)
        self._data[row, col] = value

    def __setitem__(self, point: Point, value: int) -> None:
        self.set(point[0], point[1], value)

    def resize(self, height: int, width: int) -> None:
        """Reallocate to ``height`` x ``width``; previous content is dropped."""
        if height < 0 or width < 0:
            raise InvalidDimensions(f"Grid dimensions must be >= 0, got {height}x{width}")
        self._data = np.zeros((height, width), dtype=self._data.dtype)

    def clear(self, value: int = 0) -> None:
        self._data.fill(value)

    # Conversions
    def copy(self) -> "PixelGrid":
        return PixelGrid.from_array(self._data)

    def to_array(self) -> np.ndarray:
        return self._data.copy()

    def to_binary(self, threshold: Optional[int] = None) -> "PixelGrid":
        """
        Return a new int32 grid of 0/1.

        Without a threshold every non-zero value maps to 1; with one, only
        values strictly above it do.
        """
        if threshold is None:
            foreground = self._data != 0
        else:
            foreground = self._data > threshold
        return PixelGrid.from_array(foreground.astype(np.int32))

    def format(self, cell_width: int = 2) -> str:
        """Render the grid as aligned text rows (for debug logs)."""
        return "\n".join(
            " ".join(f"{int(v):>{cell_width}}" for v in row) for row in self._data
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelGrid):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._data, other._data))

    def __repr__(self) -> str:
        return f"PixelGrid(height={self.height}, width={self.width}, dtype={self._data.dtype})"


def load_grid(obj: Any, operation: str = "grid operation") -> Optional[PixelGrid]:
    """
    Coerce caller input for a public operation.

    Empty or malformed grids are a no-op rather than a failure: a warning is
    logged and None is returned so the caller can produce an empty result.
    """
    try:
        grid = PixelGrid.coerce(obj)
    except InvalidDimensions as e:
        logger.warning(f"{operation}: invalid grid, nothing to do ({e})")
        return None

    if grid.is_empty:
        logger.debug(f"{operation}: empty grid, nothing to do")
        return None
    return grid
