"""Import all models to register them with SQLAlchemy metadata."""
from shipcatalog.models.base import Base, ShipTypeEnum
from shipcatalog.models.ship import Ship

__all__ = [
    "Base",
    "ShipTypeEnum",
    "Ship",
]
