"""In-memory ship query pipeline: filter → sort → paginate.

The whole table is loaded and scanned on every request. Every criterion is an
independent AND predicate, so the order in which they are checked does not
change the result.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, fields
from typing import Any, Iterable, Optional, Sequence

from shipcatalog.models.base import ShipTypeEnum
from shipcatalog.utils.epoch import to_epoch_ms

DEFAULT_PAGE_NUMBER = 0
DEFAULT_PAGE_SIZE = 3


class ShipOrder(str, enum.Enum):
    ID = "ID"
    SPEED = "SPEED"
    RATING = "RATING"
    DATE = "DATE"

    @property
    def field_name(self) -> str:
        match self:
            case ShipOrder.ID:
                return "id"
            case ShipOrder.SPEED:
                return "speed"
            case ShipOrder.RATING:
                return "rating"
            case ShipOrder.DATE:
                return "prod_date"


@dataclass(frozen=True)
class ShipCriteria:
    """Optional filter set. ``after``/``before`` are epoch milliseconds."""

    name: Optional[str] = None
    planet: Optional[str] = None
    ship_type: Optional[ShipTypeEnum] = None
    after: Optional[int] = None
    before: Optional[int] = None
    is_used: Optional[bool] = None
    min_speed: Optional[float] = None
    max_speed: Optional[float] = None
    min_crew_size: Optional[int] = None
    max_crew_size: Optional[int] = None
    min_rating: Optional[float] = None
    max_rating: Optional[float] = None

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))


def _matches(ship: Any, c: ShipCriteria) -> bool:
    if c.name is not None and c.name not in ship.name:
        return False
    if c.planet is not None and c.planet not in ship.planet:
        return False
    if c.ship_type is not None and ship.ship_type != c.ship_type:
        return False
    if c.after is not None or c.before is not None:
        prod_ms = to_epoch_ms(ship.prod_date)
        if c.after is not None and prod_ms < c.after:
            return False
        if c.before is not None and prod_ms > c.before:
            return False
    if c.is_used is not None and ship.is_used != c.is_used:
        return False
    if c.min_speed is not None and ship.speed < c.min_speed:
        return False
    if c.max_speed is not None and ship.speed > c.max_speed:
        return False
    if c.min_crew_size is not None and ship.crew_size < c.min_crew_size:
        return False
    if c.max_crew_size is not None and ship.crew_size > c.max_crew_size:
        return False
    if c.min_rating is not None and ship.rating < c.min_rating:
        return False
    if c.max_rating is not None and ship.rating > c.max_rating:
        return False
    return True


def filter_ships(ships: Iterable[Any], criteria: ShipCriteria | None = None) -> list:
    """Return the ships satisfying every present criterion, in input order."""
    if criteria is None or criteria.is_empty():
        return list(ships)
    return [ship for ship in ships if _matches(ship, criteria)]


def sort_ships(ships: Iterable[Any], order: ShipOrder | None = None) -> list:
    """Stable ascending sort by the order's field; defaults to id."""
    key = (order or ShipOrder.ID).field_name
    return sorted(ships, key=lambda ship: getattr(ship, key))


def paginate(
    ships: Sequence[Any],
    page_number: int | None = None,
    page_size: int | None = None,
) -> list:
    """Zero-based page slice; out-of-range pages are empty rather than errors."""
    if page_number is None:
        page_number = DEFAULT_PAGE_NUMBER
    if page_size is None:
        page_size = DEFAULT_PAGE_SIZE
    if page_number < 0 or page_size <= 0:
        return []
    start = page_number * page_size
    return list(ships[start:start + page_size])


def list_ships(
    ships: Iterable[Any],
    criteria: ShipCriteria | None = None,
    order: ShipOrder | None = None,
    page_number: int | None = None,
    page_size: int | None = None,
) -> list:
    # Sort the full filtered set so page boundaries do not depend on page size
    matched = filter_ships(ships, criteria)
    return paginate(sort_ships(matched, order), page_number, page_size)


def count_ships(ships: Iterable[Any], criteria: ShipCriteria | None = None) -> int:
    return len(filter_ships(ships, criteria))
