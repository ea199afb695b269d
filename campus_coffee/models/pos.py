"""Point of Sale Model"""
from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func
from campus_coffee.database import Base
from campus_coffee.schemas.pos import (
    CITY_MAX_LENGTH, HOUSE_NUMBER_MAX_LENGTH, NAME_MAX_LENGTH, STREET_MAX_LENGTH
)


class PosRecord(Base):
    """Point of sale (cafe, bakery, vending machine, cafeteria)"""
    __tablename__ = "pos"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(NAME_MAX_LENGTH), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=False, default='')
    type = Column(String(32), nullable=False)  # PosType name
    campus = Column(String(32), nullable=False)  # CampusType name
    street = Column(String(STREET_MAX_LENGTH), nullable=False)
    house_number = Column(String(HOUSE_NUMBER_MAX_LENGTH), nullable=False)
    postal_code = Column(Integer, nullable=False)
    city = Column(String(CITY_MAX_LENGTH), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
