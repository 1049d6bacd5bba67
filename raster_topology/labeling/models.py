"""
Data structures for connected component labeling.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Set, Tuple, Union

import numpy as np

from ..pixel_grid import PixelGrid

# Neighbour offsets (d_row, d_col)
FOUR_NEIGHBORS: Tuple[Tuple[int, int], ...] = ((-1, 0), (0, -1), (0, 1), (1, 0))
EIGHT_NEIGHBORS: Tuple[Tuple[int, int], ...] = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1), (0, 1),
    (1, -1), (1, 0), (1, 1),
)

# Already-visited neighbours in a row-major scan
FOUR_CAUSAL: Tuple[Tuple[int, int], ...] = ((-1, 0), (0, -1))
EIGHT_CAUSAL: Tuple[Tuple[int, int], ...] = ((-1, -1), (-1, 0), (-1, 1), (0, -1))


class Connectivity(int, Enum):
    """Which neighbouring pixels count as adjacent."""
    FOUR = 4  # N/S/E/W
    EIGHT = 8  # all compass directions

    @classmethod
    def parse(cls, value: Union["Connectivity", int, str]) -> "Connectivity":
        """Accept 4, 8, "4", "8", "four", "eight" or a Connectivity."""
        if isinstance(value, Connectivity):
            return value
        aliases = {"4": cls.FOUR, "four": cls.FOUR, "8": cls.EIGHT, "eight": cls.EIGHT}
        key = str(value).strip().lower()
        if key not in aliases:
            raise ValueError(f"connectivity must be 4 or 8, got {value!r}")
        return aliases[key]

    @property
    def neighbors(self) -> Tuple[Tuple[int, int], ...]:
        return FOUR_NEIGHBORS if self is Connectivity.FOUR else EIGHT_NEIGHBORS

    @property
    def causal_neighbors(self) -> Tuple[Tuple[int, int], ...]:
        return FOUR_CAUSAL if self is Connectivity.FOUR else EIGHT_CAUSAL


class LabelingMethod(str, Enum):
    """Interchangeable labeling strategies."""
    FLOOD_FILL = "flood_fill"  # breadth-first queue
    TWO_PASS = "two_pass"  # provisional labels + equivalence classes


class EquivalenceClasses:
    """
    Provisional label -> set of labels found equivalent to it.

    Sets are only merged lazily: ``resolve`` computes the transitive
    closure and maps every label to the minimal member of its class.
    """

    def __init__(self):
        self._equivalent: Dict[int, Set[int]] = {}

    def __len__(self) -> int:
        return len(self._equivalent)

    def __contains__(self, label: int) -> bool:
        return label in self._equivalent

    def add(self, label: int) -> None:
        """Register a freshly minted label (equivalent to itself)."""
        self._equivalent.setdefault(label, set()).add(label)

    def merge(self, labels: Set[int]) -> None:
        """Record every label in ``labels`` as equivalent to all the others."""
        for label in labels:
            self._equivalent.setdefault(label, set()).update(labels)

    def equivalents(self, label: int) -> Set[int]:
        """Labels directly recorded as equivalent (no closure)."""
        return set(self._equivalent.get(label, {label}))

    def classes(self) -> List[Set[int]]:
        """Transitively closed classes, ordered by their minimal label."""
        seen: Set[int] = set()
        classes = []
        for label in sorted(self._equivalent):
            if label in seen:
                continue
            members = {label}
            stack = [label]
            while stack:
                current = stack.pop()
                for other in self._equivalent.get(current, ()):
                    if other not in members:
                        members.add(other)
                        stack.append(other)
            seen |= members
            classes.append(members)
        return classes

    def resolve(self) -> Dict[int, int]:
        """
        Map each provisional label to its final label.

        Each class collapses onto its minimal member; classes are then
        renumbered 1..n in order of that member, which is discovery order.
        """
        mapping = {}
        for final, members in enumerate(self.classes(), start=1):
            for label in members:
                mapping[label] = final
        return mapping


@dataclass
class LabelingResult:
    """
    Label grid plus component count.

    Attributes:
        labels: Label per pixel (0 = background), same shape as the input
        count: Number of components; labels are in [1, count]
        connectivity: Connectivity used
        method: Strategy used
    """
    labels: PixelGrid
    count: int
    connectivity: Connectivity = Connectivity.EIGHT
    method: LabelingMethod = LabelingMethod.FLOOD_FILL
    metadata: Dict[str, Any] = field(default_factory=dict)

    def component_sizes(self) -> Dict[int, int]:
        """Pixel count per label (background excluded)."""
        if self.count == 0:
            return {}
        counts = np.bincount(self.labels.data.ravel(), minlength=self.count + 1)
        return {label: int(counts[label]) for label in range(1, self.count + 1)}

    def mask(self, label: int) -> np.ndarray:
        """Boolean mask of one component."""
        return self.labels.data == label

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "count": int(self.count),
            "connectivity": int(self.connectivity.value),
            "method": self.method.value,
            "shape": {"height": self.labels.height, "width": self.labels.width},
            "component_sizes": {str(k): v for k, v in self.component_sizes().items()},
        }

    @classmethod
    def empty(
        cls,
        connectivity: Connectivity = Connectivity.EIGHT,
        method: LabelingMethod = LabelingMethod.FLOOD_FILL,
    ) -> "LabelingResult":
        """Zero components on an empty label grid."""
        return cls(labels=PixelGrid(0, 0), count=0, connectivity=connectivity, method=method)
