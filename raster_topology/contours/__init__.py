"""
Contour Tracing Module

Follows the outer and hole borders of binary grids and links them into a
nesting tree rooted at a synthetic background contour.
"""

from .models import (
    Contour,
    ContourTree,
    ContourType,
    TraceStats,
)
from .tracer import extract_contours, extract_contours_with_stats
from .rasterize import (
    boundary_mask,
    contour_area,
    contour_to_opencv,
    draw_contours,
    to_opencv,
)

__all__ = [
    "Contour",
    "ContourTree",
    "ContourType",
    "TraceStats",
    "extract_contours",
    "extract_contours_with_stats",
    "boundary_mask",
    "contour_area",
    "contour_to_opencv",
    "draw_contours",
    "to_opencv",
]
