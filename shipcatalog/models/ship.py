"""Ship entity — the only record kept in the catalogue."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, Integer, Float, Boolean, DateTime, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column
from shipcatalog.models.base import Base, ShipTypeEnum


class Ship(Base):
    __tablename__ = "ships"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    planet: Mapped[str] = mapped_column(String(50), nullable=False)
    ship_type: Mapped[ShipTypeEnum] = mapped_column(SAEnum(ShipTypeEnum), nullable=False)
    # Naive UTC; only the calendar year feeds the rating
    prod_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    is_used: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    speed: Mapped[float] = mapped_column(Float, nullable=False)
    crew_size: Mapped[int] = mapped_column(Integer, nullable=False)
    # Derived from speed, is_used and prod_date; written only by ship_validation
    rating: Mapped[float] = mapped_column(Float, nullable=False)

    def __repr__(self) -> str:
        return f"<Ship id={self.id} name={self.name!r} rating={self.rating}>"
