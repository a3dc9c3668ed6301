"""Layout, transition and persistence services"""

from hierview.services.layout_engine import compute_viewport, layout_tree
from hierview.services.transition import TransitionPlan, plan_transition
from hierview.services.tree_store import JsonFileStore, MemoryStore, TreeStore

__all__ = [
    "compute_viewport",
    "layout_tree",
    "TransitionPlan",
    "plan_transition",
    "JsonFileStore",
    "MemoryStore",
    "TreeStore",
]
