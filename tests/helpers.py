"""Shared test collaborators and builders"""
from datetime import datetime, timezone

from campus_coffee.exceptions import DuplicatePosName, NodeNotFound, PosNotFound
from campus_coffee.schemas.osm import ExternalNode
from campus_coffee.schemas.pos import Pos, PosDraft

RADA_NODE_ID = 5589879349
RADA_TAGS = {
    "name": "Rada Coffee & Rösterei",
    "amenity": "cafe",
    "addr:street": "Hauptstraße",
    "addr:housenumber": "1",
    "addr:postcode": "69117",
    "addr:city": "Heidelberg",
}


class DummyStore:
    """In-memory stand-in for PosStore that enforces unique names"""

    def __init__(self):
        self.records = {}
        self.next_id = 1
        self.writes = []

    async def get_all(self):
        return [self.records[pos_id] for pos_id in sorted(self.records)]

    async def get_by_id(self, pos_id):
        if pos_id not in self.records:
            raise PosNotFound(pos_id)
        return self.records[pos_id]

    async def upsert(self, pos):
        self.writes.append(pos)
        for existing in self.records.values():
            if existing.name == pos.name and existing.id != pos.id:
                raise DuplicatePosName(pos.name)
        now = datetime.now(timezone.utc)
        if pos.id is None:
            pos_id = self.next_id
            self.next_id += 1
            created_at = now
        else:
            if pos.id not in self.records:
                raise PosNotFound(pos.id)
            pos_id = pos.id
            created_at = self.records[pos_id].created_at
        saved = Pos(
            **pos.model_dump(exclude={"id"}),
            id=pos_id,
            created_at=created_at,
            updated_at=now,
        )
        self.records[pos_id] = saved
        return saved

    async def clear(self):
        deleted = len(self.records)
        self.records.clear()
        return deleted


class DummyOsmClient:
    """Serves nodes from a dict; anything else is not found"""

    def __init__(self, nodes=None):
        self.nodes = dict(nodes or {})
        self.requested = []

    async def fetch_node(self, node_id):
        self.requested.append(node_id)
        if node_id not in self.nodes:
            raise NodeNotFound(node_id)
        return self.nodes[node_id]


def make_node(tags, node_id=RADA_NODE_ID, latitude=49.4122362, longitude=8.7077883):
    return ExternalNode(id=node_id, latitude=latitude, longitude=longitude, tags=tags)


def make_draft(**overrides):
    fields = dict(
        name="Schmelzpunkt",
        description="Great waffles",
        type="CAFE",
        campus="ALTSTADT",
        street="Hauptstraße",
        house_number="90",
        postal_code=69117,
        city="Heidelberg",
    )
    fields.update(overrides)
    return PosDraft(**fields)


