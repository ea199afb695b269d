"""Pydantic Schemas"""
from campus_coffee.schemas.pos import PosType, CampusType, PosDraft, Pos
from campus_coffee.schemas.osm import ExternalNode

__all__ = [
    "PosType",
    "CampusType",
    "PosDraft",
    "Pos",
    "ExternalNode",
]
