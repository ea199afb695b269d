"""API Routers"""
from campus_coffee.routers import pos

__all__ = ["pos"]
