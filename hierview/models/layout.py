"""Layout pass entities"""

from dataclasses import dataclass, field
from typing import Optional

from hierview.models.tree import TreeNode


@dataclass(frozen=True)
class Point:
    """Scene position: ``x`` runs along tree depth, ``y`` along leaf order"""

    x: float
    y: float

    def lerp(self, other: "Point", t: float) -> "Point":
        return Point(self.x + (other.x - self.x) * t, self.y + (other.y - self.y) * t)


@dataclass
class LayoutNode:
    """One visible node of a layout pass"""

    node: TreeNode
    depth: int
    position: Point
    parent_id: Optional[str] = None
    previous_position: Optional[Point] = None

    @property
    def id(self) -> str:
        return self.node.id

    @property
    def name(self) -> str:
        return self.node.name

    @property
    def hidden_children(self) -> Optional[list[TreeNode]]:
        return self.node.hidden_children

    @property
    def is_leaf(self) -> bool:
        return self.node.is_leaf

    @property
    def is_collapsed(self) -> bool:
        return self.node.is_collapsed

    @property
    def weight(self) -> float:
        """Sum of leaf values below the node, hidden leaves included"""
        return self.node.total_value()


@dataclass(frozen=True)
class LinkEdge:
    """Parent to child edge, keyed by the child id"""

    parent_id: str
    child_id: str
    source: Point
    target: Point


@dataclass(frozen=True)
class Bounds:
    min_x: float
    max_x: float
    min_y: float
    max_y: float


@dataclass(frozen=True)
class Viewport:
    """Visible scene rectangle for a pass"""

    left: float
    top: float
    width: float
    height: float


@dataclass
class LayoutResult:
    nodes: list[LayoutNode]
    links: list[LinkEdge]
    height: int
    level_spacing: float
    _index: dict[str, LayoutNode] = field(default_factory=dict, repr=False)

    def __post_init__(self):
        self._index = {entry.id: entry for entry in self.nodes}

    def get(self, node_id: str) -> Optional[LayoutNode]:
        return self._index.get(node_id)

    def ids(self) -> list[str]:
        return [entry.id for entry in self.nodes]

    def positions(self) -> list[Point]:
        return [entry.position for entry in self.nodes]

    def bounds(self) -> Bounds:
        xs = [entry.position.x for entry in self.nodes]
        ys = [entry.position.y for entry in self.nodes]
        return Bounds(min(xs), max(xs), min(ys), max(ys))
