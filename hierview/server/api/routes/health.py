"""Health check endpoint"""

from fastapi import APIRouter

from hierview import __version__
from hierview.server.dependencies import get_tree_store
from hierview.server.schemas import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint"""
    return HealthResponse(
        status="ok",
        version=__version__,
        data_file=str(get_tree_store().path),
    )
