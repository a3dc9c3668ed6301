"""Graphics items for tree nodes and links"""
import math

from PySide6.QtCore import QPointF, QRectF, Qt, Signal
from PySide6.QtGui import QBrush, QColor, QFont, QPainterPath, QPen
from PySide6.QtWidgets import (
    QGraphicsEllipseItem,
    QGraphicsObject,
    QGraphicsPathItem,
    QGraphicsSimpleTextItem,
)

from hierview.models.layout import LayoutNode
from hierview.models.tree import DEFAULT_LEAF_VALUE
from hierview.services.transition import LinkState, NodeState

NODE_RADIUS = 6
# Radius scale bounds relative to a default-weight leaf
MIN_SCALE = 0.75
MAX_SCALE = 2.0
# Gap between the circle edge and the label
LABEL_GAP = 4

COLLAPSED_FILL = "#555555"
EXPANDED_FILL = "#999999"
LINK_COLOR = QColor(85, 85, 85, 102)  # #555, 40%
ADD_COLOR = "#2e7d32"


def node_radius(weight: float) -> float:
    """Circle radius for a subtree weight; area grows with the weight"""
    scale = math.sqrt(max(weight, 0.0) / DEFAULT_LEAF_VALUE)
    return NODE_RADIUS * min(max(scale, MIN_SCALE), MAX_SCALE)


class _AddButton(QGraphicsSimpleTextItem):
    """Green "+" above the node; clicking it asks for a new child"""

    def __init__(self, parent: "NodeItem"):
        super().__init__("+", parent)
        self.node_item = parent
        self.setBrush(QBrush(QColor(ADD_COLOR)))
        font = QFont()
        font.setPixelSize(14)
        font.setBold(True)
        self.setFont(font)
        self.place(NODE_RADIUS)
        self.setCursor(Qt.PointingHandCursor)

    def mousePressEvent(self, event):
        if event.button() == Qt.LeftButton:
            self.node_item.addRequested.emit(self.node_item.node_id)
            event.accept()
        else:
            super().mousePressEvent(event)

    def place(self, radius: float):
        rect = self.boundingRect()
        self.setPos(-rect.width() / 2, -radius - rect.height() - 2)


class NodeItem(QGraphicsObject):
    """Circle + label + add button for one tree node"""

    toggleRequested = Signal(str)
    addRequested = Signal(str)

    def __init__(self, node_id: str):
        super().__init__()
        self.node_id = node_id
        self.setCursor(Qt.PointingHandCursor)

        self.circle = QGraphicsEllipseItem(
            -NODE_RADIUS, -NODE_RADIUS, 2 * NODE_RADIUS, 2 * NODE_RADIUS, self
        )
        self.circle.setPen(QPen(QColor("#333333"), 1))

        self.label = QGraphicsSimpleTextItem("", self)
        font = QFont()
        font.setPixelSize(14)
        self.label.setFont(font)

        self.add_button = _AddButton(self)
        self.radius = float(NODE_RADIUS)

    def update_from(self, entry: LayoutNode):
        """Refresh label, size and fill from the node's current state"""
        self.prepareGeometryChange()
        weight = entry.weight
        self.radius = node_radius(weight)
        self.circle.setRect(-self.radius, -self.radius, 2 * self.radius, 2 * self.radius)
        self.add_button.place(self.radius)
        self.setToolTip(f"{entry.name}\nWeight: {weight:g}")
        self.circle.setBrush(
            QBrush(QColor(COLLAPSED_FILL if entry.is_collapsed else EXPANDED_FILL))
        )
        self.label.setText(entry.name)
        rect = self.label.boundingRect()
        if entry.is_leaf:
            self.label.setPos(self.radius + LABEL_GAP, -rect.height() / 2)
        else:
            self.label.setPos(-self.radius - LABEL_GAP - rect.width(), -rect.height() / 2)

    def apply_state(self, state: NodeState):
        self.setPos(state.position.x, state.position.y)
        self.setOpacity(state.opacity)

    def boundingRect(self) -> QRectF:
        return self.childrenBoundingRect()

    def paint(self, painter, option, widget=None):
        pass

    def mousePressEvent(self, event):
        if event.button() == Qt.LeftButton:
            self.toggleRequested.emit(self.node_id)
            event.accept()
        else:
            super().mousePressEvent(event)


class LinkItem(QGraphicsPathItem):
    """Horizontal cubic link from parent to child"""

    def __init__(self, child_id: str):
        super().__init__()
        self.child_id = child_id
        self.setPen(QPen(LINK_COLOR, 1.5))
        self.setZValue(-1)

    def apply_state(self, state: LinkState):
        start, c1, c2, end = state.path
        path = QPainterPath(QPointF(start.x, start.y))
        path.cubicTo(QPointF(c1.x, c1.y), QPointF(c2.x, c2.y), QPointF(end.x, end.y))
        self.setPath(path)
