"""
Connected component labeling entry point.

Dispatches to one of the interchangeable strategies. Both produce the same
pixel partition; only the raw label numbers are allowed to differ.
"""

import logging
from typing import Any, Union

from .flood_fill import label_flood_fill
from .models import Connectivity, LabelingMethod, LabelingResult
from .two_pass import label_two_pass

logger = logging.getLogger(__name__)

_STRATEGIES = {
    LabelingMethod.FLOOD_FILL: label_flood_fill,
    LabelingMethod.TWO_PASS: label_two_pass,
}


def label_components(
    grid: Any,
    connectivity: Union[Connectivity, int, str] = Connectivity.EIGHT,
    method: Union[LabelingMethod, str] = LabelingMethod.FLOOD_FILL,
) -> LabelingResult:
    """
    Assign each foreground pixel a component label.

    Two pixels belong to the same component when they are linked by a chain
    of adjacent pixels (under ``connectivity``) carrying the same non-zero
    value.

    Args:
        grid: 2-D grid; 0 = background
        connectivity: 4 or 8 neighbourhood
        method: "flood_fill" or "two_pass"

    Returns:
        LabelingResult (empty result for empty or malformed grids)
    """
    connectivity = Connectivity.parse(connectivity)
    method = LabelingMethod(method)

    result = _STRATEGIES[method](grid, connectivity)
    logger.debug(
        f"Labeled {result.count} component(s) on {result.labels.height}x{result.labels.width} grid "
        f"({method.value}, {connectivity.value}-connected)"
    )
    return result


def count_components(
    grid: Any,
    connectivity: Union[Connectivity, int, str] = Connectivity.EIGHT,
    method: Union[LabelingMethod, str] = LabelingMethod.FLOOD_FILL,
) -> int:
    """Number of connected components in ``grid``."""
    return label_components(grid, connectivity, method).count
