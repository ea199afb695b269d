"""POS Schemas. Datetime serialized as UTC with Z for API."""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from campus_coffee.utils.datetime_utils import serialize_datetime_utc


class PosType(str, Enum):
    """Kind of point of sale"""
    CAFE = "CAFE"
    BAKERY = "BAKERY"
    VENDING_MACHINE = "VENDING_MACHINE"
    CAFETERIA = "CAFETERIA"


class CampusType(str, Enum):
    """University campus a POS belongs to"""
    ALTSTADT = "ALTSTADT"
    BERGHEIM = "BERGHEIM"
    INF = "INF"


NAME_MAX_LENGTH = 255
STREET_MAX_LENGTH = 255
HOUSE_NUMBER_MAX_LENGTH = 32
CITY_MAX_LENGTH = 255
# Stored in a 32-bit INTEGER column
POSTAL_CODE_MAX = 2**31 - 1


class PosBase(BaseModel):
    """Base POS fields"""
    name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    description: str = ""
    type: PosType
    campus: CampusType
    street: str = Field(..., min_length=1, max_length=STREET_MAX_LENGTH)
    house_number: str = Field(..., min_length=1, max_length=HOUSE_NUMBER_MAX_LENGTH)
    postal_code: int = Field(..., ge=0, le=POSTAL_CODE_MAX)
    city: str = Field(..., min_length=1, max_length=CITY_MAX_LENGTH)

    @field_validator("name", "street", "house_number", "city")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class PosDraft(PosBase):
    """POS as submitted for an upsert: no id means create, an id means update"""
    id: Optional[int] = None


class Pos(PosBase):
    """Persisted POS"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_serializer("created_at", "updated_at")
    def _serialize_timestamps(self, value: Optional[datetime]) -> Optional[str]:
        return serialize_datetime_utc(value) if value is not None else None
