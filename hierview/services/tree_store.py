"""Tree persistence"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from hierview.exceptions import PersistenceError
from hierview.models.tree import TreeNode

logger = logging.getLogger(__name__)


def parse_tree(data: Any) -> TreeNode:
    """Validate serialized tree data"""
    try:
        return TreeNode.model_validate(data)
    except ValidationError as e:
        raise PersistenceError(f"Invalid tree data: {e}") from e


class TreeStore:
    """Load/save contract used by the controller.

    ``load`` returns ``None`` when nothing has been stored yet. Both methods
    raise ``PersistenceError`` on failure.
    """

    def load(self) -> Optional[TreeNode]:
        raise NotImplementedError

    def save(self, root: TreeNode) -> None:
        raise NotImplementedError


class MemoryStore(TreeStore):
    """Keeps the last saved snapshot in memory"""

    def __init__(self, data: Optional[dict] = None):
        self.data = data
        self.save_count = 0

    def load(self) -> Optional[TreeNode]:
        if self.data is None:
            return None
        return parse_tree(self.data)

    def save(self, root: TreeNode) -> None:
        self.data = root.to_data()
        self.save_count += 1


class JsonFileStore(TreeStore):
    """Single JSON document on disk"""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def load(self) -> Optional[TreeNode]:
        if not self.path.exists():
            logger.info(f"No saved tree at {self.path}")
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Failed to read {self.path}: {e}") from e
        root = parse_tree(data)
        logger.info(f"Loaded tree with {root.count()} nodes from {self.path}")
        return root

    def save(self, root: TreeNode) -> None:
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(
                json.dumps(root.to_data(), indent=2, ensure_ascii=False), encoding="utf-8"
            )
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise PersistenceError(f"Failed to write {self.path}: {e}") from e
        logger.debug(f"Saved tree to {self.path}")


def create_store(settings) -> TreeStore:
    """Remote store when a server URL is configured, local file otherwise"""
    if settings.server_url:
        from hierview.services.api_client import ApiTreeStore, TreeAPIClient

        logger.info(f"Using tree server at {settings.server_url}")
        return ApiTreeStore(TreeAPIClient(settings.server_url, timeout=settings.request_timeout))

    logger.info(f"Using local tree file {settings.data_file}")
    return JsonFileStore(settings.data_file)
