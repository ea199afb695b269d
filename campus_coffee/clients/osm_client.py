"""
OpenStreetMap API client
Fetches single nodes from the OSM API v0.6 JSON endpoint
"""
import asyncio
import logging
import time
from typing import Any, Callable, Dict, Optional

import aiohttp

from campus_coffee.config import Settings
from campus_coffee.exceptions import NodeNotFound
from campus_coffee.schemas.osm import ExternalNode
from campus_coffee.utils.metrics import record_osm_fetch

logger = logging.getLogger(__name__)

DEFAULT_OSM_API_URL = "https://www.openstreetmap.org/api/0.6"


class OsmClient:
    """
    HTTP client for the OpenStreetMap API.

    API Endpoint:
    - GET /node/{id}.json
      Response: { "elements": [ { "id": ..., "lat": ..., "lon": ..., "tags": {...} } ] }

    Every failure (404, other HTTP errors, transport errors, timeouts, empty or
    malformed payloads) surfaces as NodeNotFound. The specific reason is only
    logged and counted.
    """

    def __init__(
        self,
        api_url: str = DEFAULT_OSM_API_URL,
        timeout_seconds: float = 10.0,
        user_agent: str = "campus-coffee/1.0",
        session_factory: Optional[Callable[[], Any]] = None,
    ):
        """
        Initialize OSM client.

        Args:
            api_url: Base URL of the API, without trailing slash
            timeout_seconds: Total timeout for one request
            user_agent: User-Agent header sent with each request
            session_factory: Callable returning an async context manager
                with a ``get`` method (defaults to a new aiohttp.ClientSession)
        """
        self.api_url = api_url.rstrip('/')
        self.timeout_seconds = timeout_seconds
        self.user_agent = user_agent
        self._session_factory = session_factory or self._new_session

    @classmethod
    def from_settings(cls, settings: Settings) -> "OsmClient":
        return cls(
            api_url=settings.osm_api_url,
            timeout_seconds=settings.osm_timeout_seconds,
            user_agent=settings.osm_user_agent,
        )

    def _new_session(self) -> aiohttp.ClientSession:
        """One session per fetch; nothing is kept between calls."""
        return aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
            headers={"User-Agent": self.user_agent, "Accept": "application/json"},
        )

    def node_url(self, node_id: int) -> str:
        return f"{self.api_url}/node/{node_id}.json"

    async def fetch_node(self, node_id: int) -> ExternalNode:
        """
        Fetch a node by ID.

        Args:
            node_id: Positive OSM node ID

        Returns:
            The node with its coordinates and tags

        Raises:
            NodeNotFound: if the node cannot be retrieved for any reason
        """
        start = time.time()
        if node_id is None or node_id <= 0:
            raise self._not_found(node_id, "not_found", "invalid node id", start)

        url = self.node_url(node_id)
        logger.info("Fetching OSM node %s from OpenStreetMap API", node_id)

        try:
            async with self._session_factory() as session:
                async with session.get(url) as response:
                    if response.status == 404:
                        raise self._not_found(node_id, "not_found", "HTTP 404", start)
                    if response.status >= 400:
                        raise self._not_found(node_id, "http_error", f"HTTP {response.status}", start)
                    payload = await response.json(content_type=None)
        except asyncio.TimeoutError:
            raise self._not_found(node_id, "timeout", f"no response within {self.timeout_seconds}s", start)
        except aiohttp.ClientError as e:
            raise self._not_found(node_id, "transport_error", str(e) or type(e).__name__, start)
        except ValueError as e:
            # Body was not valid JSON
            raise self._not_found(node_id, "malformed", str(e), start)

        node = self._parse_node(node_id, payload, start)
        record_osm_fetch("success", time.time() - start)
        logger.info("Successfully fetched OSM node %s with %d tags", node_id, len(node.tags))
        return node

    def _parse_node(self, node_id: int, payload: Any, start: float) -> ExternalNode:
        """Normalize the API payload into an ExternalNode."""
        if not isinstance(payload, dict):
            raise self._not_found(node_id, "malformed", "payload is not an object", start)

        elements = payload.get("elements")
        if not elements or not isinstance(elements, list):
            raise self._not_found(node_id, "empty_response", "no elements in response", start)

        element = elements[0]
        if not isinstance(element, dict):
            raise self._not_found(node_id, "malformed", "element is not an object", start)

        raw_tags = element.get("tags") or {}
        if not isinstance(raw_tags, dict):
            raise self._not_found(node_id, "malformed", "tags is not an object", start)

        try:
            latitude = self._coordinate(element.get("lat"))
            longitude = self._coordinate(element.get("lon"))
        except (TypeError, ValueError) as e:
            raise self._not_found(node_id, "malformed", f"invalid coordinate: {e}", start)

        tags: Dict[str, str] = {str(key): str(value) for key, value in raw_tags.items()}
        return ExternalNode(id=node_id, latitude=latitude, longitude=longitude, tags=tags)

    @staticmethod
    def _coordinate(value: Any) -> Optional[float]:
        if value is None:
            return None
        return float(value)

    @staticmethod
    def _not_found(node_id: Optional[int], outcome: str, reason: str, start: float) -> NodeNotFound:
        record_osm_fetch(outcome, time.time() - start)
        logger.error("OSM node %s not found (%s): %s", node_id, outcome, reason)
        return NodeNotFound(node_id)
