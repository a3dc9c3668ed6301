"""REST API client for the tree server"""

import logging
from typing import Optional

import httpx

from hierview.exceptions import PersistenceError
from hierview.models.tree import TreeNode
from hierview.services.tree_store import TreeStore, parse_tree

logger = logging.getLogger(__name__)


class TreeAPIClient:
    """HTTP client for server API"""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout, connect=5.0),
                transport=self._transport,
            )
        return self._client

    def close(self):
        if self._client:
            self._client.close()
            self._client = None

    # === Health ===

    def health_check(self) -> dict:
        """Check server health"""
        client = self._get_client()
        response = client.get("/api/v1/health")
        response.raise_for_status()
        return response.json()

    # === Tree ===

    def fetch_tree(self) -> Optional[dict]:
        """Get stored tree data, None if the server has none yet"""
        client = self._get_client()
        response = client.get("/api/v1/tree")
        if response.status_code == 404:
            return None
        response.raise_for_status()
        return response.json()

    def save_tree(self, data: dict) -> dict:
        """Replace stored tree data"""
        client = self._get_client()
        response = client.post("/api/v1/tree", json=data)
        response.raise_for_status()
        return response.json()


class ApiTreeStore(TreeStore):
    """Tree store backed by the tree server"""

    def __init__(self, client: TreeAPIClient):
        self.client = client

    def load(self) -> Optional[TreeNode]:
        try:
            data = self.client.fetch_tree()
        except httpx.HTTPError as e:
            raise PersistenceError(f"Failed to fetch tree: {e}") from e
        if data is None:
            return None
        return parse_tree(data)

    def save(self, root: TreeNode) -> None:
        try:
            self.client.save_tree(root.to_data())
        except httpx.HTTPError as e:
            raise PersistenceError(f"Failed to save tree: {e}") from e
