"""Custom exceptions"""


class AppError(Exception):
    """Base application error"""

    pass


class ServiceError(AppError):
    """Service layer error"""

    pass


class NodeNotFoundError(AppError):
    """Operation referenced a node id that is not in the tree"""

    def __init__(self, node_id: str):
        super().__init__(f"Node not found: {node_id}")
        self.node_id = node_id


class InvalidNodeNameError(AppError):
    """Node name is empty after trimming"""

    pass


class PersistenceError(ServiceError):
    """Tree could not be loaded from or saved to the store"""

    pass
