"""Hierarchy view controller

Owns the tree, applies the user commands (toggle, insert, expand/collapse
all), persists structural changes and turns every change into a
``TransitionPlan`` from the currently displayed state to the new layout.
"""

import logging
from typing import Iterable, Optional

from hierview.config import LayoutSettings
from hierview.exceptions import InvalidNodeNameError, NodeNotFoundError, PersistenceError
from hierview.models.layout import LayoutResult
from hierview.models.tree import IdAllocator, TreeNode, assign_ids, default_tree, new_leaf
from hierview.services.layout_engine import compute_viewport, layout_tree
from hierview.services.transition import Frame, LinkState, NodeState, TransitionPlan, plan_transition
from hierview.services.tree_store import MemoryStore, TreeStore

logger = logging.getLogger(__name__)


class HierarchyController:
    """Tree state plus the displayed state of the last transition.

    With ``animated=False`` every plan is settled as soon as it is created;
    otherwise the caller drives it with ``advance(t)``. A change arriving
    before a plan finishes starts from whatever ``advance`` last displayed.
    """

    def __init__(
        self,
        store: Optional[TreeStore] = None,
        settings: Optional[LayoutSettings] = None,
        toast_manager=None,
        animated: bool = False,
    ):
        self.store = store if store is not None else MemoryStore()
        self.settings = settings or LayoutSettings()
        self.toast_manager = toast_manager
        self.animated = animated

        self.root: Optional[TreeNode] = None
        self._ids = IdAllocator()
        self._plan: Optional[TransitionPlan] = None
        self._displayed_nodes: dict[str, NodeState] = {}
        self._displayed_links: dict[str, LinkState] = {}
        # Set when the store could not be read; saving would replace its content
        self.read_only = False

    # === Loading ===

    def load(self, collapsed: Iterable[str] = ()) -> TransitionPlan:
        """Load the tree from the store (default tree if none) and lay it out"""
        root = None
        failed = False
        try:
            root = self.store.load()
        except PersistenceError as e:
            logger.error(f"Failed to load tree: {e}")
            self._notify_error(f"Failed to load tree: {e}")
            failed = True

        if root is None:
            logger.info("Using built-in default tree")
            root = default_tree()

        plan = self.set_root(root, collapsed)
        self.read_only = failed
        if failed:
            logger.warning("Saving disabled until the tree is reloaded")
        return plan

    def set_root(self, root: TreeNode, collapsed: Iterable[str] = ()) -> TransitionPlan:
        """Replace the tree and draw it from scratch"""
        self.root = root
        self._ids = assign_ids(root)
        self._plan = None
        self._displayed_nodes = {}
        self._displayed_links = {}

        for node_id in collapsed:
            node = root.find(node_id)
            if node is not None:
                node.collapse()

        logger.info(f"Tree set: {root.count()} nodes, root {root.id}")
        return self._relayout(root.id)

    # === Queries ===

    def find(self, node_id: str) -> Optional[TreeNode]:
        if self.root is None:
            return None
        return self.root.find(node_id)

    def node_count(self) -> int:
        return self.root.count() if self.root is not None else 0

    def collapsed_ids(self) -> list[str]:
        if self.root is None:
            return []
        return [node.id for node in self.root.walk() if node.is_collapsed]

    def layout(self) -> LayoutResult:
        """Layout of the current visible shape"""
        self._require_root()
        previous = {node_id: state.position for node_id, state in self._displayed_nodes.items()}
        return layout_tree(self.root, self.settings, previous)

    @property
    def plan(self) -> Optional[TransitionPlan]:
        return self._plan

    @property
    def displayed_nodes(self) -> dict[str, NodeState]:
        return dict(self._displayed_nodes)

    @property
    def displayed_links(self) -> dict[str, LinkState]:
        return dict(self._displayed_links)

    # === Commands ===

    def toggle(self, node_id: str) -> Optional[TransitionPlan]:
        """Expand a collapsed node or collapse an expanded one"""
        try:
            node = self._get(node_id)
        except NodeNotFoundError as e:
            logger.info(f"Toggle ignored: {e}")
            return None

        if node.expand():
            logger.debug(f"Expanded {node_id}")
        elif node.collapse():
            logger.debug(f"Collapsed {node_id}")
        else:
            return None
        return self._relayout(node_id)

    def insert_child(self, parent_id: str, name: Optional[str]) -> Optional[TransitionPlan]:
        """Append a new leaf under ``parent_id`` and persist the tree"""
        try:
            parent = self._get(parent_id)
            clean_name = (name or "").strip()
            if not clean_name:
                raise InvalidNodeNameError("Node name is empty")
        except (NodeNotFoundError, InvalidNodeNameError) as e:
            logger.info(f"Insert ignored: {e}")
            return None

        child = new_leaf(clean_name, self._ids.allocate(), self.settings.default_leaf_value)
        parent.add_child(child)
        logger.info(f"Added node {child.id} ({child.name!r}) under {parent_id}")

        self._save()
        return self._relayout(parent_id)

    def expand_all(self) -> Optional[TransitionPlan]:
        self._require_root()
        changed = [node.id for node in self.root.walk() if node.expand()]
        if not changed:
            return None
        logger.debug(f"Expanded {len(changed)} nodes")
        return self._relayout(self.root.id)

    def collapse_all(self) -> Optional[TransitionPlan]:
        """Collapse every expanded node below the root"""
        self._require_root()
        changed = [node.id for node in self.root.walk() if node is not self.root and node.collapse()]
        if not changed:
            return None
        logger.debug(f"Collapsed {len(changed)} nodes")
        return self._relayout(self.root.id)

    def restore_collapsed(self, node_ids: Iterable[str]) -> Optional[TransitionPlan]:
        """Collapse the given nodes, skipping unknown ids and leaves"""
        self._require_root()
        changed = []
        for node_id in node_ids:
            node = self.root.find(node_id)
            if node is not None and node.collapse():
                changed.append(node_id)
        if not changed:
            return None
        return self._relayout(self.root.id)

    # === Animation ===

    def advance(self, t: float) -> Frame:
        """Evaluate the active plan at ``t`` and record it as displayed"""
        if self._plan is None:
            return Frame(t=t, nodes=dict(self._displayed_nodes), links=dict(self._displayed_links))
        frame = self._plan.frame(t)
        self._displayed_nodes = dict(frame.nodes)
        self._displayed_links = dict(frame.links)
        return frame

    def finish(self) -> Frame:
        return self.advance(1.0)

    # === Internals ===

    def _require_root(self):
        if self.root is None:
            raise RuntimeError("Tree not loaded. Call load() first.")

    def _get(self, node_id: str) -> TreeNode:
        node = self.find(node_id)
        if node is None:
            raise NodeNotFoundError(node_id)
        return node

    def _relayout(self, source_id: str) -> TransitionPlan:
        result = self.layout()
        source = result.get(source_id) or result.nodes[0]
        viewport = compute_viewport(result, source.position, self.settings)

        self._plan = plan_transition(
            result,
            self._displayed_nodes,
            self._displayed_links,
            source_id,
            viewport,
            self.settings.duration_ms,
        )
        self.advance(0.0 if self.animated else 1.0)
        return self._plan

    def _save(self):
        if self.read_only:
            logger.warning("Tree not saved: storage could not be read")
            self._notify_error("Tree not saved: reload to retry reading storage")
            return
        try:
            self.store.save(self.root)
        except PersistenceError as e:
            logger.error(f"Failed to save tree: {e}")
            self._notify_error("Failed to save tree")

    def _notify_error(self, message: str):
        if self.toast_manager:
            self.toast_manager.error(message)
