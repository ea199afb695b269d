"""OpenStreetMap node schema"""
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class ExternalNode(BaseModel):
    """A single OSM node as returned by the fetcher"""
    model_config = ConfigDict(frozen=True)

    id: int
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    tags: Dict[str, str] = Field(default_factory=dict)
