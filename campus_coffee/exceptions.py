"""Domain exceptions for the POS service.

Every error carries the minimal identifying context of what failed
(node ID, POS ID or name) so the HTTP layer can build a distinct response.
"""
from typing import Iterable, Optional


class CampusCoffeeError(Exception):
    """Base class for all domain errors"""
    pass


class NodeNotFound(CampusCoffeeError):
    """Raised when an OSM node cannot be retrieved, for whatever reason"""

    def __init__(self, node_id: int):
        self.node_id = node_id
        super().__init__(f"OpenStreetMap node {node_id} not found")


class MissingRequiredFields(CampusCoffeeError):
    """Raised when a node's tags lack information a POS requires"""

    def __init__(self, node_id: int, fields: Optional[Iterable[str]] = None):
        self.node_id = node_id
        self.fields = list(fields or [])
        message = f"OpenStreetMap node {node_id} is missing required fields"
        if self.fields:
            message += f": {', '.join(self.fields)}"
        super().__init__(message)


class PosNotFound(CampusCoffeeError):
    """Raised when no POS exists with the given ID"""

    def __init__(self, pos_id: int):
        self.pos_id = pos_id
        super().__init__(f"POS with ID {pos_id} does not exist")


class DuplicatePosName(CampusCoffeeError):
    """Raised by the store when a write would violate name uniqueness"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"POS with name '{name}' already exists")
