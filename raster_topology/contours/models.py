"""
Data structures for the border (contour) tree.

The tree is an arena: nodes live in one list and refer to each other by
index. Children lists are owned by their parent; ``parent`` is a plain
index back-reference.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from ..errors import InternalInvariantViolation
from ..pixel_grid import Point

ROOT_INDEX = 0
BACKGROUND_BORDER_ID = 1


class ContourType(str, Enum):
    OUTER = "outer"  # foreground region against its enclosing background
    HOLE = "hole"  # background region enclosed by foreground
    BACKGROUND = "background"  # synthetic root (image frame)


@dataclass
class Contour:
    """
    One border of the tree.

    Attributes:
        index: Position in the owning tree's arena
        contour_type: OUTER, HOLE or BACKGROUND (root only)
        points: Ordered (row, col) boundary points; a pixel visited twice
            while following a thin border appears twice
        parent: Arena index of the enclosing border (None for the root)
        children: Arena indices of directly nested borders
        border_id: Sequential border number used while scanning
    """
    index: int
    contour_type: ContourType
    points: List[Point] = field(default_factory=list)
    parent: Optional[int] = None
    children: List[int] = field(default_factory=list)
    border_id: int = BACKGROUND_BORDER_ID

    @property
    def is_root(self) -> bool:
        return self.contour_type == ContourType.BACKGROUND

    @property
    def is_outer(self) -> bool:
        return self.contour_type == ContourType.OUTER

    @property
    def is_hole(self) -> bool:
        return self.contour_type == ContourType.HOLE

    def __len__(self) -> int:
        return len(self.points)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "index": self.index,
            "type": self.contour_type.value,
            "border_id": self.border_id,
            "parent": self.parent,
            "children": list(self.children),
            "points": [{"row": int(r), "col": int(c)} for r, c in self.points],
            "point_count": len(self.points),
        }


@dataclass
class TraceStats:
    """Counters collected during one extraction."""
    outer: int = 0
    hole: int = 0
    single_point: int = 0
    degenerate: int = 0

    @property
    def traced(self) -> int:
        return self.outer + self.hole

    def to_dict(self) -> Dict[str, int]:
        return {
            "outer": self.outer,
            "hole": self.hole,
            "single_point": self.single_point,
            "degenerate": self.degenerate,
        }


class ContourTree:
    """
    Background root plus the nested OUTER/HOLE borders of an image.

    Example:
        >>> tree = extract_contours(grid)
        >>> for contour in tree.walk():
        ...     print(tree.depth(contour), contour.contour_type, len(contour))
    """

    def __init__(self):
        self._nodes: List[Contour] = [
            Contour(index=ROOT_INDEX, contour_type=ContourType.BACKGROUND)
        ]

    @property
    def root(self) -> Contour:
        return self._nodes[ROOT_INDEX]

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Contour]:
        return iter(self._nodes)

    def __getitem__(self, index: int) -> Contour:
        return self._nodes[index]

    def add(
        self,
        contour_type: ContourType,
        points: List[Point],
        parent: Contour,
        border_id: int,
    ) -> Contour:
        """Append a border and link it under ``parent``."""
        if contour_type == ContourType.BACKGROUND:
            raise InternalInvariantViolation("Only the root may be a background contour")
        if self._nodes[parent.index] is not parent:
            raise InternalInvariantViolation(f"Parent {parent.index} does not belong to this tree")

        node = Contour(
            index=len(self._nodes),
            contour_type=contour_type,
            points=points,
            parent=parent.index,
            border_id=border_id,
        )
        self._nodes.append(node)
        parent.children.append(node.index)
        return node

    # Navigation
    def parent_of(self, node: Contour) -> Optional[Contour]:
        return None if node.parent is None else self._nodes[node.parent]

    def children_of(self, node: Contour) -> List[Contour]:
        return [self._nodes[i] for i in node.children]

    def depth(self, node: Contour) -> int:
        """0 for the root, 1 for top-level outer borders, and so on."""
        depth = 0
        while node.parent is not None:
            node = self._nodes[node.parent]
            depth += 1
        return depth

    def walk(self, start: Optional[Contour] = None) -> Iterator[Contour]:
        """Depth-first pre-order traversal from ``start`` (root by default)."""
        stack = [start if start is not None else self.root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(self._nodes[i] for i in reversed(node.children))

    def borders(self) -> List[Contour]:
        """All borders except the background root, in tree order."""
        return [node for node in self.walk() if not node.is_root]

    def outer_borders(self) -> List[Contour]:
        return [node for node in self.borders() if node.is_outer]

    def hole_borders(self) -> List[Contour]:
        return [node for node in self.borders() if node.is_hole]

    def point_lists(self) -> List[List[Point]]:
        """Point sequences of every border (full-tree retrieval)."""
        return [list(node.points) for node in self.borders()]

    def total_points(self) -> int:
        return sum(len(node.points) for node in self._nodes)

    def check_consistency(self) -> None:
        """
        Verify the tree invariants.

        Raises:
            InternalInvariantViolation: on the first broken invariant
        """
        roots = [node for node in self._nodes if node.parent is None]
        if len(roots) != 1 or roots[0] is not self.root or not self.root.is_root:
            raise InternalInvariantViolation("Tree must have exactly one background root")

        for node in self._nodes:
            if node.parent is not None:
                parent = self._nodes[node.parent]
                if node.index not in parent.children:
                    raise InternalInvariantViolation(
                        f"Contour {node.index} missing from children of {parent.index}"
                    )
            for child_index in node.children:
                if self._nodes[child_index].parent != node.index:
                    raise InternalInvariantViolation(
                        f"Contour {child_index} listed under {node.index} but has another parent"
                    )

        # every node reached exactly once from the root: no cycles, no orphans
        reached = set()
        stack = [ROOT_INDEX]
        while stack:
            index = stack.pop()
            if index in reached:
                raise InternalInvariantViolation(f"Contour {index} reached twice from the root")
            reached.add(index)
            stack.extend(self._nodes[index].children)
        if len(reached) != len(self._nodes):
            raise InternalInvariantViolation("Some contours are not reachable from the root")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            "contours": [node.to_dict() for node in self._nodes],
            "contour_count": len(self._nodes) - 1,
            "outer_count": len(self.outer_borders()),
            "hole_count": len(self.hole_borders()),
            "total_points": self.total_points(),
        }
