"""Tree API routes"""

import logging

from fastapi import APIRouter, HTTPException

from hierview.exceptions import PersistenceError
from hierview.models.tree import TreeNode, assign_ids
from hierview.server.dependencies import get_tree_store
from hierview.server.schemas import SaveTreeResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def get_tree():
    """Return the stored tree"""
    store = get_tree_store()
    try:
        root = store.load()
    except PersistenceError as e:
        logger.error(f"Failed to load tree: {e}")
        raise HTTPException(status_code=500, detail="Error loading data")

    if root is None:
        raise HTTPException(status_code=404, detail="No tree saved")
    return root.to_data()


@router.post("", response_model=SaveTreeResponse)
async def save_tree(root: TreeNode):
    """Replace the stored tree"""
    assign_ids(root)
    store = get_tree_store()
    try:
        store.save(root)
    except PersistenceError as e:
        logger.error(f"Failed to save tree: {e}")
        raise HTTPException(status_code=500, detail="Error saving data")

    count = root.count()
    logger.info(f"Tree saved: {count} nodes")
    return SaveTreeResponse(status="saved", nodes=count)
