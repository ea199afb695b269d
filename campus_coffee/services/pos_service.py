"""
POS Service - business logic for POS records and OSM imports
"""
import logging
from typing import List

from campus_coffee.clients.osm_client import OsmClient
from campus_coffee.exceptions import DuplicatePosName, MissingRequiredFields, NodeNotFound, PosNotFound
from campus_coffee.schemas.pos import Pos, PosDraft
from campus_coffee.services.pos_store import PosStore
from campus_coffee.services.tag_mapper import map_node_to_pos
from campus_coffee.utils.metrics import record_pos_import, record_pos_operation

logger = logging.getLogger(__name__)


class PosService:
    """
    Orchestrates POS reads, upserts and OSM imports.

    Import flow:
    1. Fetch the OSM node
    2. Map its tags to a POS draft
    3. Upsert the draft

    Steps 1 and 2 raise before anything is written, so a failed import
    never leaves a partial record behind.
    """

    def __init__(self, store: PosStore, osm_client: OsmClient):
        self.store = store
        self.osm_client = osm_client

    async def clear(self) -> None:
        logger.warning("Clearing all POS data")
        deleted = await self.store.clear()
        record_pos_operation("clear")
        logger.info("Deleted %s POS records", deleted)

    async def get_all(self) -> List[Pos]:
        logger.debug("Retrieving all POS")
        pos_list = await self.store.get_all()
        record_pos_operation("list")
        return pos_list

    async def get_by_id(self, pos_id: int) -> Pos:
        logger.debug("Retrieving POS with ID: %s", pos_id)
        try:
            pos = await self.store.get_by_id(pos_id)
        except PosNotFound:
            record_pos_operation("get", "not_found")
            raise
        record_pos_operation("get")
        return pos

    async def upsert(self, pos: PosDraft) -> Pos:
        """Create when ``pos.id`` is None, else update an existing POS."""
        if pos.id is None:
            logger.info("Creating new POS: %s", pos.name)
            operation = "create"
        else:
            logger.info("Updating POS with ID: %s", pos.id)
            operation = "update"
            # Must exist before the update; updates never create
            try:
                await self.store.get_by_id(pos.id)
            except PosNotFound:
                record_pos_operation(operation, "not_found")
                raise

        try:
            saved = await self.store.upsert(pos)
        except DuplicatePosName as e:
            logger.error("Error upserting POS '%s': %s", pos.name, e)
            record_pos_operation(operation, "duplicate_name")
            raise
        except PosNotFound:
            record_pos_operation(operation, "not_found")
            raise

        record_pos_operation(operation)
        logger.info("Successfully upserted POS with ID: %s", saved.id)
        return saved

    async def import_from_osm_node(self, node_id: int) -> Pos:
        logger.info("Importing POS from OpenStreetMap node %s...", node_id)
        try:
            node = await self.osm_client.fetch_node(node_id)
            draft = map_node_to_pos(node)
            saved = await self.upsert(draft)
        except NodeNotFound:
            record_pos_import("node_not_found")
            raise
        except MissingRequiredFields:
            record_pos_import("missing_fields")
            raise
        except DuplicatePosName:
            record_pos_import("duplicate_name")
            raise

        record_pos_import("success")
        logger.info("Successfully imported POS '%s' from OSM node %s", saved.name, node_id)
        return saved
