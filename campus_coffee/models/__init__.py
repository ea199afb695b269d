"""SQLAlchemy Models"""
from campus_coffee.models.pos import PosRecord

__all__ = [
    "PosRecord",
]
