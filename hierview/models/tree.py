"""Tree entities"""

import logging
import re
from typing import Any, Iterator, Optional

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_LEAF_VALUE = 5.0

_ID_PATTERN = re.compile(r"^node-(\d+)$")


class TreeNode(BaseModel):
    """Persisted tree node.

    ``children`` is ``None`` for a true leaf and for a collapsed node; a
    collapsed node keeps its children list stashed in ``hidden_children``.
    The stash is view state: it is excluded from ``model_dump`` and written
    back under ``children`` by ``to_data``.
    """

    id: str = ""
    name: str
    value: Optional[float] = Field(default=None, gt=0)
    children: Optional[list["TreeNode"]] = None
    hidden_children: Optional[list["TreeNode"]] = Field(default=None, exclude=True)

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, value: Any) -> Any:
        # Stored trees may use numeric ids
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be empty")
        return value

    @property
    def is_leaf(self) -> bool:
        return self.children is None and self.hidden_children is None

    @property
    def is_collapsed(self) -> bool:
        return self.children is None and self.hidden_children is not None

    def all_children(self) -> list["TreeNode"]:
        """Visible or stashed children, whichever is set"""
        if self.children is not None:
            return self.children
        return self.hidden_children or []

    def walk(self) -> Iterator["TreeNode"]:
        """Depth-first pre-order over every node, hidden ones included"""
        yield self
        for child in self.all_children():
            yield from child.walk()

    def find(self, node_id: str) -> Optional["TreeNode"]:
        for node in self.walk():
            if node.id == node_id:
                return node
        return None

    def count(self) -> int:
        return sum(1 for _ in self.walk())

    def expand(self) -> bool:
        """Move stashed children back into ``children``"""
        if not self.hidden_children:
            return False
        self.children, self.hidden_children = self.hidden_children, None
        return True

    def collapse(self) -> bool:
        """Stash non-empty ``children`` away"""
        if not self.children:
            return False
        self.hidden_children, self.children = self.children, None
        return True

    def add_child(self, child: "TreeNode") -> None:
        """Append child, re-expanding this node if it was collapsed"""
        # Weights live on leaves only
        self.value = None
        if self.is_collapsed:
            self.children, self.hidden_children = self.hidden_children, None
        if self.children is None:
            self.children = []
        self.children.append(child)

    def total_value(self) -> float:
        """Sum of leaf weights below this node"""
        kids = self.all_children()
        if not kids:
            return self.value or 0.0
        return sum(child.total_value() for child in kids)

    def to_data(self) -> dict[str, Any]:
        """Serialize with stashed children written back under ``children``"""
        data: dict[str, Any] = {"id": self.id, "name": self.name}
        if self.value is not None:
            data["value"] = self.value
        kids = self.children if self.children is not None else self.hidden_children
        if kids is not None:
            data["children"] = [child.to_data() for child in kids]
        return data


TreeNode.model_rebuild()


class IdAllocator:
    """Hands out ``node-<n>`` ids above every id already present in the tree"""

    def __init__(self, start: int = 1):
        self._next = start

    @classmethod
    def for_tree(cls, root: TreeNode) -> "IdAllocator":
        highest = 0
        for node in root.walk():
            match = _ID_PATTERN.match(node.id)
            if match:
                highest = max(highest, int(match.group(1)))
        return cls(highest + 1)

    def allocate(self) -> str:
        node_id = f"node-{self._next}"
        self._next += 1
        return node_id


def assign_ids(root: TreeNode) -> IdAllocator:
    """Give every node without an id (or with a duplicate one) a fresh id"""
    allocator = IdAllocator.for_tree(root)
    seen: set[str] = set()
    for node in root.walk():
        if not node.id or node.id in seen:
            if node.id:
                logger.warning(f"Duplicate node id {node.id!r}, reassigning")
            node.id = allocator.allocate()
        seen.add(node.id)
    return allocator


def new_leaf(name: str, node_id: str, value: float = DEFAULT_LEAF_VALUE) -> TreeNode:
    """Create leaf node data with the default weight"""
    return TreeNode(id=node_id, name=name, value=value)


def default_tree() -> TreeNode:
    """Built-in tree used when nothing has been saved yet"""
    return TreeNode.model_validate(
        {
            "name": "root",
            "children": [
                {
                    "name": "Multiple Access",
                    "children": [
                        {
                            "name": "Random Access",
                            "children": [
                                {"name": "Pure ALOHA", "value": 5},
                                {"name": "Slotted ALOHA", "value": 5},
                                {"name": "Carrier Sense Multiple Access", "value": 5},
                            ],
                        },
                        {"name": "Control Access", "value": 10},
                    ],
                }
            ],
        }
    )
