"""
OSM tag mapping
Turns the free-form tags of an OSM node into a validated POS draft.

Priority decisions (name tag preference, POS type classification) are
ordered lists evaluated top to bottom; the first match wins.
"""
import logging
import re
from typing import Callable, List, Mapping, Optional, Tuple

from campus_coffee.exceptions import MissingRequiredFields
from campus_coffee.schemas.osm import ExternalNode
from campus_coffee.schemas.pos import (
    CITY_MAX_LENGTH, HOUSE_NUMBER_MAX_LENGTH, NAME_MAX_LENGTH, POSTAL_CODE_MAX, STREET_MAX_LENGTH,
    CampusType, PosDraft, PosType,
)

logger = logging.getLogger(__name__)

IMPORT_DESCRIPTION = "Imported from OpenStreetMap"
IMPORT_CAMPUS = CampusType.ALTSTADT
DEFAULT_POS_TYPE = PosType.CAFE

NAME_TAG_PRIORITY: Tuple[str, ...] = ("name:de", "name:en", "name")
DESCRIPTION_TAG = "description"
STREET_TAG = "addr:street"
HOUSE_NUMBER_TAG = "addr:housenumber"
POSTAL_CODE_TAG = "addr:postcode"
CITY_TAG = "addr:city"

REQUIRED_ADDRESS_TAGS: Tuple[Tuple[str, str, int], ...] = (
    ("street", STREET_TAG, STREET_MAX_LENGTH),
    ("house_number", HOUSE_NUMBER_TAG, HOUSE_NUMBER_MAX_LENGTH),
    ("city", CITY_TAG, CITY_MAX_LENGTH),
)

_POSTAL_CODE_PATTERN = re.compile(r"[0-9]+")

TagPredicate = Callable[[Mapping[str, str]], bool]


def _amenity_in(*values: str) -> TagPredicate:
    return lambda tags: tags.get("amenity") in values


def _shop_in(*values: str) -> TagPredicate:
    return lambda tags: tags.get("shop") in values


def _any_of(*predicates: TagPredicate) -> TagPredicate:
    return lambda tags: any(predicate(tags) for predicate in predicates)


POS_TYPE_RULES: List[Tuple[TagPredicate, PosType]] = [
    (_amenity_in("cafe", "biergarten"), PosType.CAFE),
    (_any_of(_amenity_in("bakery"), _shop_in("bakery")), PosType.BAKERY),
    (_amenity_in("vending_machine"), PosType.VENDING_MACHINE),
    (_amenity_in("restaurant", "fast_food"), PosType.CAFETERIA),
]


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def extract_name(tags: Mapping[str, str]) -> Optional[str]:
    """First non-blank value among the name tags, in priority order."""
    for key in NAME_TAG_PRIORITY:
        value = tags.get(key)
        if not _is_blank(value):
            return value
    return None


def extract_description(tags: Mapping[str, str]) -> str:
    return tags.get(DESCRIPTION_TAG, IMPORT_DESCRIPTION)


def classify_pos_type(tags: Mapping[str, str], node_id: Optional[int] = None) -> PosType:
    """Classify by amenity/shop tags; unknown categories fall back to CAFE."""
    for predicate, pos_type in POS_TYPE_RULES:
        if predicate(tags):
            return pos_type
    logger.warning(
        "Unknown amenity type '%s' (shop '%s') for OSM node %s, defaulting to %s",
        tags.get("amenity"), tags.get("shop"), node_id, DEFAULT_POS_TYPE.value
    )
    return DEFAULT_POS_TYPE


def parse_postal_code(value: Optional[str]) -> Optional[int]:
    """Integer postal code, or None when absent, blank, not numeric or too large to store."""
    if _is_blank(value):
        return None
    value = value.strip()
    if not _POSTAL_CODE_PATTERN.fullmatch(value):
        return None
    postal_code = int(value)
    if postal_code > POSTAL_CODE_MAX:
        return None
    return postal_code


def map_node_to_pos(node: ExternalNode) -> PosDraft:
    """
    Convert an OSM node into a POS draft.

    Args:
        node: Fetched OSM node

    Returns:
        Draft without id, ready to be created

    Raises:
        MissingRequiredFields: name, address or postal code cannot be derived
    """
    tags = node.tags
    missing: List[str] = []

    name = extract_name(tags)
    if name is None:
        logger.error("Required tag 'name' missing for OSM node %s", node.id)
        missing.append("name")
    elif len(name) > NAME_MAX_LENGTH:
        logger.error("Name of OSM node %s exceeds %d characters", node.id, NAME_MAX_LENGTH)
        missing.append("name")

    required = {}
    for field, key, max_length in REQUIRED_ADDRESS_TAGS:
        value = tags.get(key)
        if _is_blank(value):
            logger.error("Required tag '%s' missing for OSM node %s", key, node.id)
            missing.append(key)
        elif len(value) > max_length:
            logger.error("Tag '%s' of OSM node %s exceeds %d characters", key, node.id, max_length)
            missing.append(key)
        required[field] = value

    postal_code = parse_postal_code(tags.get(POSTAL_CODE_TAG))
    if postal_code is None:
        logger.error("Invalid or missing postal code '%s' for OSM node %s", tags.get(POSTAL_CODE_TAG), node.id)
        missing.append(POSTAL_CODE_TAG)

    if missing:
        raise MissingRequiredFields(node.id, missing)

    return PosDraft(
        name=name,
        description=extract_description(tags),
        type=classify_pos_type(tags, node.id),
        campus=IMPORT_CAMPUS,
        postal_code=postal_code,
        **required,
    )
