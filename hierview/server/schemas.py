"""API request/response schemas"""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response"""

    status: str
    version: str
    data_file: str


class SaveTreeResponse(BaseModel):
    """Result of storing a tree"""

    status: str
    nodes: int
