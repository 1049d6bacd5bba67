"""
Raster Topology Package

Connected component labeling and topological border following for binary
rasters: label grids with component counts, and nested outer/hole contour
trees.
"""

from .errors import (
    InternalInvariantViolation,
    InvalidDimensions,
    OutOfRange,
    TopologyError,
)
from .pixel_grid import PixelGrid
from .direction import Direction, active_neighbor
from .labeling import (
    Connectivity,
    LabelingMethod,
    LabelingResult,
    count_components,
    label_components,
    label_flood_fill,
    label_two_pass,
)
from .contours import (
    Contour,
    ContourTree,
    ContourType,
    TraceStats,
    boundary_mask,
    draw_contours,
    extract_contours,
    extract_contours_with_stats,
    to_opencv,
)
from .config import TopologyConfig
from .pipeline import (
    TopologyResult,
    analyze_topology,
    binarize,
    result_to_json,
)

__all__ = [
    "InternalInvariantViolation",
    "InvalidDimensions",
    "OutOfRange",
    "TopologyError",
    "PixelGrid",
    "Direction",
    "active_neighbor",
    "Connectivity",
    "LabelingMethod",
    "LabelingResult",
    "count_components",
    "label_components",
    "label_flood_fill",
    "label_two_pass",
    "Contour",
    "ContourTree",
    "ContourType",
    "TraceStats",
    "boundary_mask",
    "draw_contours",
    "extract_contours",
    "extract_contours_with_stats",
    "to_opencv",
    "TopologyConfig",
    "TopologyResult",
    "analyze_topology",
    "binarize",
    "result_to_json",
]
