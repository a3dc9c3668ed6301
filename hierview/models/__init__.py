"""Tree and layout models"""

from hierview.models.tree import (
    DEFAULT_LEAF_VALUE,
    IdAllocator,
    TreeNode,
    assign_ids,
    default_tree,
    new_leaf,
)
from hierview.models.layout import (
    Bounds,
    LayoutNode,
    LayoutResult,
    LinkEdge,
    Point,
    Viewport,
)

__all__ = [
    "DEFAULT_LEAF_VALUE",
    "IdAllocator",
    "TreeNode",
    "assign_ids",
    "default_tree",
    "new_leaf",
    "Bounds",
    "LayoutNode",
    "LayoutResult",
    "LinkEdge",
    "Point",
    "Viewport",
]
