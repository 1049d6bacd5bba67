"""
Topological border following.

A single row-major scan over a private marker grid finds the starting pixel
of every outer and hole border, follows each border once, and links it into
a nesting tree. Visited border pixels are re-marked with the border's id:
negative when the border passes the pixel's east side, positive otherwise.
The markers tell later parts of the scan which borders were already followed
and which border encloses the current position.

The caller's grid is never modified.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Set, Tuple

from ..direction import Direction, active_neighbor
from ..pixel_grid import PixelGrid, Point, load_grid
from .models import (
    BACKGROUND_BORDER_ID,
    Contour,
    ContourTree,
    ContourType,
    TraceStats,
)

logger = logging.getLogger(__name__)


@dataclass
class _Border:
    """Scan-time record of a border id."""
    contour_type: ContourType
    node: Optional[Contour]  # None when the border was discarded
    parent: Optional[Contour]  # attached enclosing border (None for the root)


def _enclosing_border(contour_type: ContourType, prime: _Border, tree: ContourTree) -> Contour:
    """
    Parent of a new border given the last border met on the row.

    Outer and hole borders alternate in depth: a new outer border nests
    inside a hole (or the background), a new hole inside an outer border.
    Otherwise the new border is a sibling of ``prime``.
    """
    if contour_type == ContourType.OUTER:
        nests_in_prime = prime.contour_type != ContourType.OUTER
    else:
        nests_in_prime = prime.contour_type == ContourType.OUTER

    if nests_in_prime:
        # a discarded border hands its place over to its own parent
        parent = prime.node if prime.node is not None else prime.parent
    else:
        parent = prime.parent
    return parent if parent is not None else tree.root


def _mark(markers: PixelGrid, point: Point, examined: Set[Direction], nbd: int) -> None:
    row, col = point
    if Direction.EAST in examined or col == markers.width - 1:
        markers.set(row, col, -nbd)
    elif markers.get(row, col) == 1:
        markers.set(row, col, nbd)


def _follow_border(markers: PixelGrid, start: Point, entry: Point, nbd: int) -> Optional[List[Point]]:
    """
    Follow one border from ``start``, entered from the background pixel ``entry``.

    Returns:
        The ordered border points, ``[start]`` for an isolated pixel, or None
        when the counter-clockwise search finds no foreground neighbour.
    """
    entry_direction = Direction.between(start, entry)

    first = None
    trace = entry_direction.clockwise()
    while trace != entry_direction:
        first = active_neighbor(markers, start, trace)
        if first is not None:
            break
        trace = trace.clockwise()

    if first is None:
        markers.set(start[0], start[1], -nbd)
        return [start]

    points = []
    previous, current = first, start
    while True:
        back = Direction.between(current, previous)
        trace = back.counter_clockwise()
        examined = set()
        following = None
        for _ in range(8):
            following = active_neighbor(markers, current, trace)
            if following is not None:
                break
            examined.add(trace)
            trace = trace.counter_clockwise()

        if following is None:
            return None

        points.append(current)
        _mark(markers, current, examined, nbd)

        if following == start and current == first:
            return points
        previous, current = current, following


def extract_contours_with_stats(grid: Any) -> Tuple[ContourTree, TraceStats]:
    """
    Extract the border tree of a binary grid and report what was traced.

    Any non-zero input value counts as foreground.

    Args:
        grid: 2-D grid (PixelGrid, numpy array or nested lists)

    Returns:
        (ContourTree, TraceStats); an empty or malformed grid yields a tree
        holding only the background root
    """
    tree = ContourTree()
    stats = TraceStats()

    source = load_grid(grid, "extract_contours")
    if source is None:
        return tree, stats

    markers = source.to_binary()
    borders: Dict[int, _Border] = {
        BACKGROUND_BORDER_ID: _Border(ContourType.BACKGROUND, tree.root, None)
    }
    nbd = BACKGROUND_BORDER_ID
    last_col = markers.width - 1

    for row in range(markers.height):
        lnbd = BACKGROUND_BORDER_ID

        for col in range(markers.width):
            value = markers.get(row, col)
            if value == 0:
                continue

            contour_type = None
            if value == 1 and (col == 0 or markers.get(row, col - 1) == 0):
                contour_type = ContourType.OUTER
                entry = (row, col - 1)
            elif value >= 1 and (col == last_col or markers.get(row, col + 1) == 0):
                contour_type = ContourType.HOLE
                entry = (row, col + 1)
                if value > 1:
                    lnbd = value

            if contour_type is not None:
                nbd += 1
                parent = _enclosing_border(contour_type, borders[lnbd], tree)
                points = _follow_border(markers, (row, col), entry, nbd)

                if points is None:
                    markers.set(row, col, -nbd)
                    borders[nbd] = _Border(contour_type, None, parent)
                    stats.degenerate += 1
                    logger.debug(
                        f"Discarded degenerate {contour_type.value} border {nbd} at ({row}, {col})"
                    )
                else:
                    node = tree.add(contour_type, points, parent, nbd)
                    borders[nbd] = _Border(contour_type, node, parent)
                    if contour_type == ContourType.OUTER:
                        stats.outer += 1
                    else:
                        stats.hole += 1
                    if len(points) == 1:
                        stats.single_point += 1

            value = markers.get(row, col)
            if value != 0 and value != 1:
                lnbd = abs(value)

    logger.debug(
        f"Traced {stats.outer} outer and {stats.hole} hole border(s) on "
        f"{markers.height}x{markers.width} grid ({stats.degenerate} discarded)"
    )
    return tree, stats


def extract_contours(grid: Any) -> ContourTree:
    """
    Extract the nested outer/hole border tree of a binary grid.

    Example:
        >>> tree = extract_contours([[0, 0, 0], [0, 1, 0], [0, 0, 0]])
        >>> [c.points for c in tree.borders()]
        [[(1, 1)]]
    """
    tree, _ = extract_contours_with_stats(grid)
    return tree
