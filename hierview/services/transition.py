"""Enter/update/exit transitions between two layout passes

A plan is built by diffing the node ids currently on screen against the ids
of a new layout pass. Entering nodes grow out of the source node's previous
position, exiting ones shrink into its new position, persisting ones move
from where they are displayed to where they are laid out. Links follow the
same rules keyed by their child id.

``TransitionPlan.frame(t)`` evaluates the plan at progress ``t`` in [0, 1];
the caller decides how ``t`` advances over time.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from hierview.models.layout import LayoutResult, Point, Viewport

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MS = 750


class TransitionKind(str, Enum):
    ENTER = "enter"
    UPDATE = "update"
    EXIT = "exit"


def ease_cubic_in_out(t: float) -> float:
    t = min(max(t, 0.0), 1.0) * 2
    if t <= 1:
        return t * t * t / 2
    t -= 2
    return (t * t * t + 2) / 2


def link_path(source: Point, target: Point) -> tuple[Point, Point, Point, Point]:
    """Control points of a horizontal cubic link (start, c1, c2, end)"""
    mid_x = (source.x + target.x) / 2
    return source, Point(mid_x, source.y), Point(mid_x, target.y), target


@dataclass(frozen=True)
class NodeState:
    position: Point
    opacity: float


@dataclass(frozen=True)
class LinkState:
    source: Point
    target: Point

    @property
    def path(self) -> tuple[Point, Point, Point, Point]:
        return link_path(self.source, self.target)


@dataclass(frozen=True)
class NodeTransition:
    node_id: str
    kind: TransitionKind
    start: NodeState
    end: NodeState

    def at(self, eased: float) -> NodeState:
        return NodeState(
            position=self.start.position.lerp(self.end.position, eased),
            opacity=self.start.opacity + (self.end.opacity - self.start.opacity) * eased,
        )


@dataclass(frozen=True)
class LinkTransition:
    child_id: str
    parent_id: Optional[str]
    kind: TransitionKind
    start: LinkState
    end: LinkState

    def at(self, eased: float) -> LinkState:
        return LinkState(
            source=self.start.source.lerp(self.end.source, eased),
            target=self.start.target.lerp(self.end.target, eased),
        )


@dataclass
class Frame:
    """Displayed state at one point of a transition"""

    t: float
    nodes: dict[str, NodeState] = field(default_factory=dict)
    links: dict[str, LinkState] = field(default_factory=dict)


@dataclass
class TransitionPlan:
    source_id: str
    layout: LayoutResult
    viewport: Viewport
    nodes: list[NodeTransition]
    links: list[LinkTransition]
    duration_ms: int = DEFAULT_DURATION_MS

    def of_kind(self, kind: TransitionKind) -> list[NodeTransition]:
        return [item for item in self.nodes if item.kind == kind]

    @property
    def entering(self) -> list[str]:
        return [item.node_id for item in self.of_kind(TransitionKind.ENTER)]

    @property
    def persisting(self) -> list[str]:
        return [item.node_id for item in self.of_kind(TransitionKind.UPDATE)]

    @property
    def exiting(self) -> list[str]:
        return [item.node_id for item in self.of_kind(TransitionKind.EXIT)]

    def get(self, node_id: str) -> Optional[NodeTransition]:
        for item in self.nodes:
            if item.node_id == node_id:
                return item
        return None

    def frame(self, t: float) -> Frame:
        """State at progress ``t``; exiting items are gone once ``t`` reaches 1"""
        t = min(max(t, 0.0), 1.0)
        eased = ease_cubic_in_out(t)
        done = t >= 1.0
        frame = Frame(t=t)
        for item in self.nodes:
            if done and item.kind == TransitionKind.EXIT:
                continue
            frame.nodes[item.node_id] = item.at(eased)
        for link in self.links:
            if done and link.kind == TransitionKind.EXIT:
                continue
            frame.links[link.child_id] = link.at(eased)
        return frame


def plan_transition(
    layout: LayoutResult,
    displayed_nodes: dict[str, NodeState],
    displayed_links: dict[str, LinkState],
    source_id: str,
    viewport: Viewport,
    duration_ms: int = DEFAULT_DURATION_MS,
) -> TransitionPlan:
    """Diff what is on screen against ``layout`` and build the plan"""
    source_entry = layout.get(source_id)
    source_shown = displayed_nodes.get(source_id)

    if source_entry is not None:
        source_new = source_entry.position
    elif source_shown is not None:
        source_new = source_shown.position
    else:
        source_new = layout.nodes[0].position
    source_old = source_shown.position if source_shown is not None else source_new

    nodes: list[NodeTransition] = []
    for entry in layout.nodes:
        end = NodeState(entry.position, 1.0)
        shown = displayed_nodes.get(entry.id)
        if shown is None:
            nodes.append(
                NodeTransition(entry.id, TransitionKind.ENTER, NodeState(source_old, 0.0), end)
            )
        else:
            nodes.append(NodeTransition(entry.id, TransitionKind.UPDATE, shown, end))
    for node_id, shown in displayed_nodes.items():
        if layout.get(node_id) is None:
            nodes.append(
                NodeTransition(node_id, TransitionKind.EXIT, shown, NodeState(source_new, 0.0))
            )

    links: list[LinkTransition] = []
    laid_out = set()
    for edge in layout.links:
        laid_out.add(edge.child_id)
        end = LinkState(edge.source, edge.target)
        shown_link = displayed_links.get(edge.child_id)
        if shown_link is None:
            start = LinkState(source_old, source_old)
            kind = TransitionKind.ENTER
        else:
            start = shown_link
            kind = TransitionKind.UPDATE
        links.append(LinkTransition(edge.child_id, edge.parent_id, kind, start, end))
    for child_id, shown_link in displayed_links.items():
        if child_id not in laid_out:
            links.append(
                LinkTransition(
                    child_id,
                    None,
                    TransitionKind.EXIT,
                    shown_link,
                    LinkState(source_new, source_new),
                )
            )

    plan = TransitionPlan(
        source_id=source_id,
        layout=layout,
        viewport=viewport,
        nodes=nodes,
        links=links,
        duration_ms=duration_ms,
    )
    logger.debug(
        f"Transition from {source_id}: {len(plan.entering)} enter, "
        f"{len(plan.persisting)} update, {len(plan.exiting)} exit"
    )
    return plan
