"""Collapsible tree view"""
import logging
from typing import Callable, Optional

from PySide6.QtCore import QAbstractAnimation, QRectF, Qt, QVariantAnimation, Signal
from PySide6.QtGui import QPainter
from PySide6.QtWidgets import QGraphicsScene, QGraphicsView, QInputDialog, QWidget

from hierview.controller import HierarchyController
from hierview.services.transition import Frame, TransitionPlan
from hierview.desktop.ui.tree_items import LinkItem, NodeItem

logger = logging.getLogger(__name__)


class HierarchyView(QGraphicsView):
    """Draws the controller's tree and animates every change.

    Node clicks toggle, "+" clicks prompt for a child name. Each plan is
    played by a linear 0..1 ``QVariantAnimation``; the plan applies easing.
    """

    nodeToggled = Signal(str)
    nodeInserted = Signal(str, str)  # parent_id, name

    def __init__(self, controller: HierarchyController, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.controller = controller
        self.scene = QGraphicsScene(self)
        self.setScene(self.scene)
        self.setRenderHint(QPainter.Antialiasing)
        self.setDragMode(QGraphicsView.ScrollHandDrag)
        self.setStyleSheet("background-color: white; border: none;")

        # Returns the entered name, or None when cancelled
        self.name_prompt: Callable[[str], Optional[str]] = self._prompt_name

        self._node_items: dict[str, NodeItem] = {}
        self._link_items: dict[str, LinkItem] = {}
        self._plan: Optional[TransitionPlan] = None

        self._animation = QVariantAnimation(self)
        self._animation.setStartValue(0.0)
        self._animation.setEndValue(1.0)
        self._animation.valueChanged.connect(self._on_animation_step)
        self._animation.finished.connect(self._on_animation_finished)

    @property
    def node_items(self) -> dict[str, NodeItem]:
        return self._node_items

    @property
    def link_items(self) -> dict[str, LinkItem]:
        return self._link_items

    def is_animating(self) -> bool:
        return self._animation.state() == QAbstractAnimation.Running

    def show_plan(self, plan: TransitionPlan):
        """Start playing a plan from the currently displayed state"""
        # Stopping leaves the controller at the last displayed frame
        self._animation.stop()
        self._plan = plan

        for entry in plan.layout.nodes:
            item = self._node_items.get(entry.id)
            if item is None:
                item = self._create_node_item(entry.id)
            item.update_from(entry)

        viewport = plan.viewport
        self.scene.setSceneRect(QRectF(viewport.left, viewport.top, viewport.width, viewport.height))

        if self.controller.animated and plan.duration_ms > 0:
            self._apply_frame(self.controller.advance(0.0))
            self._animation.setDuration(plan.duration_ms)
            self._animation.start()
        else:
            self._apply_frame(self.controller.finish())
            self._on_plan_done()

    def finish_animation(self):
        """Jump the running animation to its end"""
        if self.is_animating():
            self._animation.stop()
            self._apply_frame(self.controller.finish())
            self._on_plan_done()

    # === Commands ===

    def toggle_node(self, node_id: str):
        plan = self.controller.toggle(node_id)
        if plan is None:
            return
        self.show_plan(plan)
        self.nodeToggled.emit(node_id)

    def add_child(self, parent_id: str):
        name = self.name_prompt(parent_id)
        if name is None:
            return
        plan = self.controller.insert_child(parent_id, name)
        if plan is None:
            return
        self.show_plan(plan)
        self.nodeInserted.emit(parent_id, name.strip())

    def _prompt_name(self, parent_id: str) -> Optional[str]:
        name, ok = QInputDialog.getText(
            self, "Add node", "Enter name for new child node:", text="New Node"
        )
        return name if ok else None

    # === Rendering ===

    def _create_node_item(self, node_id: str) -> NodeItem:
        item = NodeItem(node_id)
        item.toggleRequested.connect(self.toggle_node)
        item.addRequested.connect(self.add_child)
        self.scene.addItem(item)
        self._node_items[node_id] = item
        return item

    def _apply_frame(self, frame: Frame):
        for node_id, state in frame.nodes.items():
            item = self._node_items.get(node_id)
            if item is None:
                item = self._create_node_item(node_id)
            item.apply_state(state)
        for node_id in list(self._node_items):
            if node_id not in frame.nodes:
                self.scene.removeItem(self._node_items.pop(node_id))

        for child_id, state in frame.links.items():
            link = self._link_items.get(child_id)
            if link is None:
                link = LinkItem(child_id)
                self.scene.addItem(link)
                self._link_items[child_id] = link
            link.apply_state(state)
        for child_id in list(self._link_items):
            if child_id not in frame.links:
                self.scene.removeItem(self._link_items.pop(child_id))

    def _on_animation_step(self, value):
        if self._plan is None:
            return
        self._apply_frame(self.controller.advance(float(value)))

    def _on_animation_finished(self):
        self._apply_frame(self.controller.finish())
        self._on_plan_done()

    def _on_plan_done(self):
        if self._plan is None:
            return
        source = self._plan.layout.get(self._plan.source_id)
        if source is not None:
            self.centerOn(source.position.x, source.position.y)
        logger.debug(f"Transition from {self._plan.source_id} done")

    def wheelEvent(self, event):
        """Zoom with the wheel, keep scrolling with Ctrl"""
        if event.modifiers() & Qt.ControlModifier:
            super().wheelEvent(event)
            return
        factor = 1.15 if event.angleDelta().y() > 0 else 0.85
        self.scale(factor, factor)
