"""Dependency injection for API routes"""

from typing import Optional

from hierview.config import settings
from hierview.services.tree_store import JsonFileStore

# Singleton instance
_tree_store: Optional[JsonFileStore] = None


def get_tree_store() -> JsonFileStore:
    """Get file store for the served tree"""
    global _tree_store
    if _tree_store is None:
        _tree_store = JsonFileStore(settings.data_file)
    return _tree_store


def reset_store():
    """Reset singleton store (used when settings change)"""
    global _tree_store
    _tree_store = None
