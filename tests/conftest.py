"""Shared fixtures"""
import os
import tempfile

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
os.environ.setdefault("HIERVIEW_LOG_DIR", tempfile.mkdtemp(prefix="hierview-logs-"))

import pytest

from hierview.models.tree import TreeNode


def make_tree(data: dict) -> TreeNode:
    return TreeNode.model_validate(data)


@pytest.fixture
def sample_tree():
    """root -> A (collapsed, hiding L1 and L2)"""
    root = make_tree(
        {
            "id": "root",
            "name": "root",
            "children": [
                {
                    "id": "a",
                    "name": "A",
                    "children": [
                        {"id": "l1", "name": "L1", "value": 5},
                        {"id": "l2", "name": "L2", "value": 5},
                    ],
                }
            ],
        }
    )
    root.find("a").collapse()
    return root


@pytest.fixture
def nested_tree():
    """root -> [A -> [B -> [B1, B2], A2], C]"""
    return make_tree(
        {
            "id": "root",
            "name": "root",
            "children": [
                {
                    "id": "a",
                    "name": "A",
                    "children": [
                        {
                            "id": "b",
                            "name": "B",
                            "children": [
                                {"id": "b1", "name": "B1", "value": 1},
                                {"id": "b2", "name": "B2", "value": 2},
                            ],
                        },
                        {"id": "a2", "name": "A2", "value": 3},
                    ],
                },
                {"id": "c", "name": "C", "value": 4},
            ],
        }
    )
