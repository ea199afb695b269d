"""Clients for external services"""
from campus_coffee.clients.osm_client import OsmClient

__all__ = ["OsmClient"]
