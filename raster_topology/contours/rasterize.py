"""
Conversions between contour trees and rasters.

Includes an export to the ``(contours, hierarchy)`` layout returned by
``cv2.findContours`` with ``RETR_TREE`` and ``CHAIN_APPROX_NONE``, so traced
trees can be drawn or measured with OpenCV.
"""

from typing import Any, List, Tuple

import cv2
import numpy as np

from ..pixel_grid import PixelGrid
from .models import Contour, ContourTree


def draw_contours(tree: ContourTree, shape: Tuple[int, int], value: int = 1) -> PixelGrid:
    """
    Paint every border point of ``tree`` into a blank grid.

    Args:
        tree: Extracted contour tree
        shape: (height, width) of the output grid
        value: Value written on border pixels

    Returns:
        PixelGrid with ``value`` on border pixels and 0 elsewhere
    """
    canvas = PixelGrid(shape[0], shape[1])
    for contour in tree.borders():
        for row, col in contour.points:
            canvas.set(row, col, value)
    return canvas


def boundary_mask(grid: Any) -> PixelGrid:
    """
    Foreground pixels with at least one background 4-neighbour.

    Pixels outside the grid count as background, so foreground pixels on
    the image edge are always boundary pixels.

    Returns:
        PixelGrid of 0/1 with the same shape as ``grid``
    """
    foreground = PixelGrid.coerce(grid).data != 0
    if foreground.size == 0:
        return PixelGrid(*foreground.shape)

    padded = np.pad(foreground, 1, mode="constant", constant_values=False)
    touches_background = (
        ~padded[:-2, 1:-1]  # north
        | ~padded[2:, 1:-1]  # south
        | ~padded[1:-1, :-2]  # west
        | ~padded[1:-1, 2:]  # east
    )
    return PixelGrid.from_array((foreground & touches_background).astype(np.int32))


def contour_to_opencv(contour: Contour) -> np.ndarray:
    """
    Convert border points to an OpenCV contour.

    Returns:
        ``Nx1x2`` int32 array of (x, y) = (col, row) points
    """
    points = np.array([(col, row) for row, col in contour.points], dtype=np.int32)
    return points.reshape((-1, 1, 2))


def to_opencv(tree: ContourTree) -> Tuple[List[np.ndarray], np.ndarray]:
    """
    Export ``tree`` in the ``cv2.findContours(..., cv2.RETR_TREE, ...)`` layout.

    Borders keep their scan order. Each hierarchy row is
    ``[next, previous, first_child, parent]`` with -1 for "none"; top-level
    borders have parent -1 (the background root is not exported).

    Returns:
        (contours, hierarchy) where hierarchy has shape ``(1, N, 4)``
    """
    borders = [node for node in tree if not node.is_root]
    position = {node.index: i for i, node in enumerate(borders)}

    contours = [contour_to_opencv(node) for node in borders]
    hierarchy = np.full((1, len(borders), 4), -1, dtype=np.int32)

    for node in tree:
        siblings = [position[i] for i in node.children]
        for k, i in enumerate(siblings):
            hierarchy[0, i, 0] = siblings[k + 1] if k + 1 < len(siblings) else -1
            hierarchy[0, i, 1] = siblings[k - 1] if k > 0 else -1
            hierarchy[0, i, 3] = -1 if node.is_root else position[node.index]
        if siblings and not node.is_root:
            hierarchy[0, position[node.index], 2] = siblings[0]

    return contours, hierarchy


def contour_area(contour: Contour) -> float:
    """Polygon area enclosed by the border points (0.0 below 3 points)."""
    if len(contour.points) < 3:
        return 0.0
    return float(cv2.contourArea(contour_to_opencv(contour)))
