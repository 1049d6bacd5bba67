"""
Two-pass labeling with equivalence classes.

Pass 1 gives every foreground pixel a provisional label taken from its
already-scanned neighbours and records which provisional labels meet.
The recorded equivalences are then closed transitively and pass 2 rewrites
each provisional label to its class representative.
"""

from typing import Any, Dict

from ..pixel_grid import PixelGrid, load_grid
from .models import Connectivity, EquivalenceClasses, LabelingMethod, LabelingResult


def _first_pass(source: PixelGrid, labels: PixelGrid, connectivity: Connectivity) -> EquivalenceClasses:
    equivalences = EquivalenceClasses()
    causal = connectivity.causal_neighbors
    next_label = 1

    for row in range(source.height):
        for col in range(source.width):
            value = source.get(row, col)
            if value == 0:
                continue

            neighbor_labels = set()
            for d_row, d_col in causal:
                n_row, n_col = row + d_row, col + d_col
                if source.try_get(n_row, n_col) == value:
                    neighbor_label = labels.get(n_row, n_col)
                    if neighbor_label != 0:
                        neighbor_labels.add(neighbor_label)

            if not neighbor_labels:
                labels.set(row, col, next_label)
                equivalences.add(next_label)
                next_label += 1
            else:
                labels.set(row, col, min(neighbor_labels))
                if len(neighbor_labels) > 1:
                    equivalences.merge(neighbor_labels)

    return equivalences


def _second_pass(labels: PixelGrid, mapping: Dict[int, int]) -> None:
    for row in range(labels.height):
        for col in range(labels.width):
            provisional = labels.get(row, col)
            if provisional != 0:
                labels.set(row, col, mapping[provisional])


def label_two_pass(grid: Any, connectivity=Connectivity.EIGHT) -> LabelingResult:
    """
    Label connected components with the classic two-pass algorithm.

    Args:
        grid: 2-D grid (PixelGrid, numpy array or nested lists); 0 = background
        connectivity: Connectivity.FOUR or Connectivity.EIGHT (or 4 / 8)

    Returns:
        LabelingResult; the partition matches label_flood_fill
    """
    connectivity = Connectivity.parse(connectivity)
    source = load_grid(grid, "label_two_pass")
    if source is None:
        return LabelingResult.empty(connectivity, LabelingMethod.TWO_PASS)

    labels = PixelGrid(source.height, source.width)
    equivalences = _first_pass(source, labels, connectivity)
    mapping = equivalences.resolve()
    _second_pass(labels, mapping)

    return LabelingResult(
        labels=labels,
        count=len(set(mapping.values())),
        connectivity=connectivity,
        method=LabelingMethod.TWO_PASS,
        metadata={"provisional_labels": len(equivalences)},
    )
