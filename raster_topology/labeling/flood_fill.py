"""
Breadth-first flood fill labeling.

Each unlabeled foreground pixel found by the row-major scan seeds a new
label that is spread to every same-valued neighbour through a FIFO queue.
Pixels are cleared in a work copy as soon as they are enqueued, so no pixel
is queued twice and the scan is O(pixels).
"""

from collections import deque
from typing import Any, Tuple

from ..pixel_grid import PixelGrid, Point, load_grid
from .models import Connectivity, LabelingMethod, LabelingResult


def _absorb(
    work: PixelGrid,
    labels: PixelGrid,
    seed: Point,
    label: int,
    offsets: Tuple[Tuple[int, int], ...],
) -> None:
    """Give ``label`` to the component containing ``seed``."""
    value = work.get(*seed)
    work.set(seed[0], seed[1], 0)
    labels.set(seed[0], seed[1], label)
    queue = deque([seed])

    while queue:
        row, col = queue.popleft()
        for d_row, d_col in offsets:
            n_row, n_col = row + d_row, col + d_col
            if work.try_get(n_row, n_col) == value:
                work.set(n_row, n_col, 0)
                labels.set(n_row, n_col, label)
                queue.append((n_row, n_col))


def label_flood_fill(grid: Any, connectivity=Connectivity.EIGHT) -> LabelingResult:
    """
    Label connected components with a breadth-first flood fill.

    Args:
        grid: 2-D grid (PixelGrid, numpy array or nested lists); 0 = background
        connectivity: Connectivity.FOUR or Connectivity.EIGHT (or 4 / 8)

    Returns:
        LabelingResult with labels numbered 1..count in row-major discovery order

    Example:
        >>> result = label_flood_fill([[1, 0, 1]], connectivity=4)
        >>> result.count
        2
    """
    connectivity = Connectivity.parse(connectivity)
    source = load_grid(grid, "label_flood_fill")
    if source is None:
        return LabelingResult.empty(connectivity, LabelingMethod.FLOOD_FILL)

    work = source.copy()
    labels = PixelGrid(source.height, source.width)
    offsets = connectivity.neighbors
    current_label = 0

    for row in range(source.height):
        for col in range(source.width):
            if work.get(row, col) == 0:
                continue
            current_label += 1
            _absorb(work, labels, (row, col), current_label, offsets)

    return LabelingResult(
        labels=labels,
        count=current_label,
        connectivity=connectivity,
        method=LabelingMethod.FLOOD_FILL,
    )
