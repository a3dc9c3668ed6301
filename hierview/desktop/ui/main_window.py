"""Main application window"""
import logging
from typing import Optional

from PySide6.QtGui import QAction
from PySide6.QtWidgets import QLabel, QMainWindow, QToolBar

from hierview.config import Settings, settings as default_settings
from hierview.controller import HierarchyController
from hierview.desktop.ui.toast import ToastManager
from hierview.desktop.ui.tree_state import TreeStateMixin
from hierview.desktop.ui.tree_view import HierarchyView
from hierview.services.tree_store import TreeStore, create_store

logger = logging.getLogger(__name__)


class MainWindow(TreeStateMixin, QMainWindow):
    """Tree view with expand/collapse/reload toolbar"""

    def __init__(self, settings: Optional[Settings] = None, store: Optional[TreeStore] = None):
        super().__init__()
        self.settings = settings or default_settings
        self.setWindowTitle("hierview")
        self.resize(1280, 800)

        self.toast_manager = ToastManager(self)
        self.controller = HierarchyController(
            store=store if store is not None else create_store(self.settings),
            settings=self.settings.layout_settings(),
            toast_manager=self.toast_manager,
            animated=True,
        )

        self.view = HierarchyView(self.controller, self)
        self.setCentralWidget(self.view)

        self._setup_toolbar()
        self._setup_status_bar()
        self._connect_signals()

    def _setup_toolbar(self):
        toolbar = QToolBar("Tree", self)
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        self.action_expand = QAction("▼ Expand all", self)
        self.action_expand.setToolTip("Expand every node")
        toolbar.addAction(self.action_expand)

        self.action_collapse = QAction("▲ Collapse all", self)
        self.action_collapse.setToolTip("Collapse every node below the root")
        toolbar.addAction(self.action_collapse)

        toolbar.addSeparator()

        self.action_reload = QAction("↻ Reload", self)
        self.action_reload.setToolTip("Reload tree from storage")
        toolbar.addAction(self.action_reload)

    def _setup_status_bar(self):
        self.stats_label = QLabel("Nodes: 0")
        self.statusBar().addPermanentWidget(self.stats_label)

    def _connect_signals(self):
        self.action_expand.triggered.connect(self._on_expand_all)
        self.action_collapse.triggered.connect(self._on_collapse_all)
        self.action_reload.triggered.connect(self.load_tree)
        self.view.nodeToggled.connect(self._on_tree_changed)
        self.view.nodeInserted.connect(self._on_tree_changed)

    def load_tree(self):
        """Load tree from storage and restore collapsed nodes"""
        collapsed = self._load_collapsed_state()
        plan = self.controller.load(collapsed)
        self.view.show_plan(plan)
        self._update_stats()
        logger.info(f"Tree loaded: {self.controller.node_count()} nodes")

    def _on_expand_all(self):
        plan = self.controller.expand_all()
        if plan is not None:
            self.view.show_plan(plan)
            self._on_tree_changed()

    def _on_collapse_all(self):
        plan = self.controller.collapse_all()
        if plan is not None:
            self.view.show_plan(plan)
            self._on_tree_changed()

    def _on_tree_changed(self, *args):
        self._save_collapsed_state()
        self._update_stats()

    def _update_stats(self):
        self.stats_label.setText(
            f"Nodes: {self.controller.node_count()}  |  "
            f"Collapsed: {len(self.controller.collapsed_ids())}"
        )
