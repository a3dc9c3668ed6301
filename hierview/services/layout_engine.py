"""Tree layout pass

Places the visible part of a tree for a horizontal drawing: depth runs along
``x`` with evenly spaced levels, leaves are stacked along ``y`` in pre-order
with a fixed separation, and every expanded node is centered between its
first and last visible child. The root always sits at ``y == 0``.
"""

import logging
from typing import Optional

from hierview.config import LayoutSettings
from hierview.models.layout import LayoutNode, LayoutResult, LinkEdge, Point, Viewport
from hierview.models.tree import TreeNode

logger = logging.getLogger(__name__)


def visible_height(root: TreeNode) -> int:
    """Number of visible levels below the root"""
    if not root.children:
        return 0
    return 1 + max(visible_height(child) for child in root.children)


def layout_tree(
    root: TreeNode,
    settings: Optional[LayoutSettings] = None,
    previous: Optional[dict[str, Point]] = None,
) -> LayoutResult:
    """Lay out every node reachable through visible ``children`` lists.

    ``previous`` maps node ids to the positions currently on screen; matching
    nodes get it as ``previous_position``.
    """
    settings = settings or LayoutSettings()
    previous = previous or {}

    height = visible_height(root)
    usable = settings.width - settings.margin_left - settings.margin_right
    level_spacing = usable / (1 + height)

    nodes: list[LayoutNode] = []
    leaf_slot = 0

    def place(node: TreeNode, depth: int, parent_id: Optional[str]) -> float:
        nonlocal leaf_slot
        entry = LayoutNode(
            node=node,
            depth=depth,
            position=Point(depth * level_spacing, 0.0),
            parent_id=parent_id,
            previous_position=previous.get(node.id),
        )
        nodes.append(entry)

        if node.children:
            child_ys = [place(child, depth + 1, node.id) for child in node.children]
            y = (child_ys[0] + child_ys[-1]) / 2
        else:
            y = leaf_slot * settings.node_separation
            leaf_slot += 1

        entry.position = Point(entry.position.x, y)
        return y

    root_y = place(root, 0, None)
    for entry in nodes:
        entry.position = Point(entry.position.x, entry.position.y - root_y)

    by_id = {entry.id: entry for entry in nodes}
    links = [
        LinkEdge(
            parent_id=entry.parent_id,
            child_id=entry.id,
            source=by_id[entry.parent_id].position,
            target=entry.position,
        )
        for entry in nodes
        if entry.parent_id is not None
    ]

    logger.debug(f"Layout: {len(nodes)} nodes, {height} levels, spacing {level_spacing:.1f}")
    return LayoutResult(nodes=nodes, links=links, height=height, level_spacing=level_spacing)


def compute_viewport(
    result: LayoutResult, source: Point, settings: Optional[LayoutSettings] = None
) -> Viewport:
    """Scene rectangle large enough for the drawing, centered on ``source``"""
    settings = settings or LayoutSettings()
    bounds = result.bounds()

    calculated_height = bounds.max_y - bounds.min_y + settings.margin_top + settings.margin_bottom
    height = max(settings.min_height, calculated_height)

    required_width = bounds.max_x + settings.margin_left + settings.margin_right
    width = max(settings.width, required_width)

    return Viewport(
        left=-settings.margin_left,
        top=source.y - height / 2,
        width=width,
        height=height,
    )
