"""Tree state management (collapsed nodes persistence)"""
import logging
from typing import TYPE_CHECKING

from PySide6.QtCore import QSettings

if TYPE_CHECKING:
    from hierview.desktop.ui.main_window import MainWindow

logger = logging.getLogger(__name__)

SETTINGS_ORG = "hierview"
SETTINGS_APP = "TreeView"


class TreeStateMixin:
    """Mixin for collapsed state persistence"""

    def _settings(self: "MainWindow") -> QSettings:
        return QSettings(SETTINGS_ORG, SETTINGS_APP)

    def _save_collapsed_state(self: "MainWindow"):
        """Save collapsed node ids to settings"""
        collapsed = self.controller.collapsed_ids()
        self._settings().setValue("collapsed_nodes", collapsed)
        logger.debug(f"Saved {len(collapsed)} collapsed nodes")

    def _load_collapsed_state(self: "MainWindow") -> list[str]:
        """Load collapsed node ids from settings"""
        value = self._settings().value("collapsed_nodes", [])
        # QSettings returns a bare string for single-item lists on some backends
        if isinstance(value, str):
            value = [value]
        collapsed = [str(node_id) for node_id in value or []]
        logger.debug(f"Loaded {len(collapsed)} collapsed nodes")
        return collapsed
