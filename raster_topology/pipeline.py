"""
Topology Analysis Pipeline

Binarises a raster, labels its connected components and extracts its
nested border tree in one call.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from .config.topology_config import TopologyConfig
from .contours.models import ContourTree, TraceStats
from .contours.rasterize import contour_area
from .contours.tracer import extract_contours_with_stats
from .labeling.labeler import label_components
from .labeling.models import LabelingResult
from .pixel_grid import PixelGrid, load_grid

logger = logging.getLogger(__name__)


@dataclass
class TopologyResult:
    """Combined results from all analysis stages"""
    image_shape: Tuple[int, int]
    labeling: Optional[LabelingResult] = None
    contours: Optional[ContourTree] = None
    trace_stats: Optional[TraceStats] = None
    processing_time_ms: float = 0.0
    warnings: List[str] = field(default_factory=list)

    @property
    def component_count(self) -> int:
        return self.labeling.count if self.labeling is not None else 0

    def contour_summary(self) -> List[Dict[str, Any]]:
        """One entry per border: type, nesting depth, size and enclosed area."""
        if self.contours is None:
            return []
        return [
            {
                "index": node.index,
                "type": node.contour_type.value,
                "parent": node.parent,
                "depth": self.contours.depth(node),
                "point_count": len(node.points),
                "area": round(contour_area(node), 2),
            }
            for node in self.contours.borders()
        ]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "image_shape": {
                "height": int(self.image_shape[0]),
                "width": int(self.image_shape[1]),
            },
            "labeling": self.labeling.to_dict() if self.labeling is not None else None,
            "contours": self.contour_summary(),
            "trace_stats": self.trace_stats.to_dict() if self.trace_stats is not None else None,
            "processing_time_ms": round(float(self.processing_time_ms), 3),
            "warnings": list(self.warnings),
        }


def binarize(image: Any, threshold: int = 0) -> Optional[PixelGrid]:
    """
    Map an input raster to a {0, 1} grid (1 where value > threshold).

    Returns None for empty or malformed input.
    """
    grid = load_grid(image, "binarize")
    if grid is None:
        return None
    return grid.to_binary(threshold)


def analyze_topology(image: Any, config: Optional[TopologyConfig] = None) -> TopologyResult:
    """
    Run labeling and border following on a raster.

    Args:
        image: 2-D grid (numpy array, nested lists or PixelGrid)
        config: Optional configuration overrides

    Returns:
        TopologyResult; stages disabled in ``config`` are left as None
    """
    if config is None:
        config = TopologyConfig.default()

    start_time = time.time()
    binary = binarize(image, config.foreground_threshold)

    if binary is None:
        logger.warning("analyze_topology: empty or invalid input, returning empty result")
        return TopologyResult(
            image_shape=(0, 0),
            labeling=LabelingResult.empty(config.connectivity, config.labeling_method)
            if config.label_components else None,
            contours=ContourTree() if config.extract_contours else None,
            trace_stats=TraceStats() if config.extract_contours else None,
            warnings=["empty or invalid input grid"],
        )

    result = TopologyResult(image_shape=binary.shape)

    # Stage 1: Connected components
    if config.label_components:
        result.labeling = label_components(
            binary,
            connectivity=config.connectivity,
            method=config.labeling_method,
        )

    # Stage 2: Border following
    if config.extract_contours:
        result.contours, result.trace_stats = extract_contours_with_stats(binary)
        if result.trace_stats.degenerate:
            result.warnings.append(
                f"{result.trace_stats.degenerate} degenerate border(s) discarded"
            )

    result.processing_time_ms = (time.time() - start_time) * 1000

    logger.info(
        f"Topology analysis of {binary.height}x{binary.width} grid: "
        f"{result.component_count} component(s), "
        f"{result.trace_stats.traced if result.trace_stats else 0} border(s) "
        f"in {result.processing_time_ms:.1f} ms"
    )
    return result


def convert_numpy_types(obj: Any) -> Any:
    """Recursively convert numpy types to Python native types for JSON serialization"""
    if isinstance(obj, dict):
        return {key: convert_numpy_types(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [convert_numpy_types(item) for item in obj]
    elif isinstance(obj, tuple):
        return tuple(convert_numpy_types(item) for item in obj)
    elif isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, np.floating):
        return float(obj)
    elif isinstance(obj, np.ndarray):
        return obj.tolist()
    elif isinstance(obj, np.bool_):
        return bool(obj)
    else:
        return obj


def result_to_json(
    result: TopologyResult,
    include_labels: bool = False,
    include_points: bool = False,
) -> Dict[str, Any]:
    """
    Convert TopologyResult to JSON-serializable dict.

    Args:
        result: Pipeline result
        include_labels: Add the full label grid as nested lists
        include_points: Add the full contour tree with every border point
    """
    output = convert_numpy_types(result.to_dict())

    if include_labels and result.labeling is not None:
        output["label_grid"] = convert_numpy_types(result.labeling.labels.data)

    if include_points and result.contours is not None:
        output["contour_tree"] = convert_numpy_types(result.contours.to_dict())

    return output
