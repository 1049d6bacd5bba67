"""
Compass directions for border following.

Directions are numbered clockwise starting at north, so rotating
clockwise/counter-clockwise is +1/-1 modulo 8.
"""

from enum import IntEnum
from typing import Optional, Tuple

from .errors import InternalInvariantViolation
from .pixel_grid import PixelGrid, Point

# (d_row, d_col) per direction, indexed by Direction value
_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (-1, 0),   # north
    (-1, 1),   # north-east
    (0, 1),    # east
    (1, 1),    # south-east
    (1, 0),    # south
    (1, -1),   # south-west
    (0, -1),   # west
    (-1, -1),  # north-west
)


class Direction(IntEnum):
    NORTH = 0
    NORTH_EAST = 1
    EAST = 2
    SOUTH_EAST = 3
    SOUTH = 4
    SOUTH_WEST = 5
    WEST = 6
    NORTH_WEST = 7

    @property
    def offset(self) -> Tuple[int, int]:
        return _OFFSETS[self.value]

    def clockwise(self) -> "Direction":
        return Direction((self.value + 1) % 8)

    def counter_clockwise(self) -> "Direction":
        return Direction((self.value - 1) % 8)

    def reverse(self) -> "Direction":
        return Direction((self.value + 4) % 8)

    def step(self, point: Point) -> Point:
        d_row, d_col = _OFFSETS[self.value]
        return point[0] + d_row, point[1] + d_col

    @classmethod
    def between(cls, from_point: Point, to_point: Point) -> "Direction":
        """
        Direction leading from ``from_point`` to its 8-neighbour ``to_point``.

        Raises:
            InternalInvariantViolation: the points are identical or not adjacent
        """
        d_row = to_point[0] - from_point[0]
        d_col = to_point[1] - from_point[1]
        if (d_row, d_col) == (0, 0):
            raise InternalInvariantViolation(
                f"Cannot take a direction between identical points {from_point}"
            )
        try:
            return cls(_OFFSETS.index((d_row, d_col)))
        except ValueError:
            raise InternalInvariantViolation(
                f"Points {from_point} and {to_point} are not 8-neighbours"
            ) from None


def active_neighbor(grid: PixelGrid, point: Point, direction: Direction) -> Optional[Point]:
    """
    Return the neighbour of ``point`` in ``direction`` if it is inside the
    grid and non-zero, else None.
    """
    row, col = direction.step(point)
    value = grid.try_get(row, col)
    if value is None or value == 0:
        return None
    return row, col
