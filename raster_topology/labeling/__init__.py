"""
Connected Component Labeling

Partitions foreground pixels into connected components under 4- or
8-connectivity, using either a flood fill or a two-pass strategy.
"""

from .models import (
    Connectivity,
    EquivalenceClasses,
    LabelingMethod,
    LabelingResult,
)
from .flood_fill import label_flood_fill
from .two_pass import label_two_pass
from .labeler import label_components, count_components

__all__ = [
    "Connectivity",
    "EquivalenceClasses",
    "LabelingMethod",
    "LabelingResult",
    "label_flood_fill",
    "label_two_pass",
    "label_components",
    "count_components",
]
