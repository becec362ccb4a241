"""Ship field validation and derived rating.

Create and update both gate on the same field bounds:

  name, planet   1..50 characters
  speed          0.01..0.99, stored rounded to 2 decimals
  prod_date      calendar year 2800..3019
  crew_size      1..9999
  ship_type      one of ShipTypeEnum

Rating is never taken from the caller. It is recomputed from speed, is_used
and the production year whenever one of them changes:

  k      = 0.5 if is_used else 1.0
  rating = round_half_up(100 * 80 * speed * k / (3019 - year + 1)) / 100

Validators return a ValidationRejected value instead of raising; None means
the record passed and has been updated in place.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from shipcatalog.models.base import ShipTypeEnum

logger = logging.getLogger(__name__)

MAX_TEXT_LENGTH = 50
MIN_SPEED = 0.01
MAX_SPEED = 0.99
MIN_CREW_SIZE = 1
MAX_CREW_SIZE = 9999
MIN_PROD_YEAR = 2800
MAX_PROD_YEAR = 3019

USED_SHIP_COEFFICIENT = 0.5
NEW_SHIP_COEFFICIENT = 1.0

# Field order for update checks and application
UPDATE_FIELD_ORDER = ("name", "planet", "crew_size", "speed", "prod_date", "is_used", "ship_type")
RATING_INPUTS = frozenset({"speed", "prod_date", "is_used"})


@dataclass(frozen=True)
class ValidationRejected:
    field: str
    reason: str

    def __str__(self) -> str:
        return f"{self.field}: {self.reason}"


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def round_speed(speed: float) -> float:
    return round_half_up(speed * 100.0) / 100.0


def compute_rating(speed: float, is_used: bool, prod_date: datetime) -> float:
    k = USED_SHIP_COEFFICIENT if is_used else NEW_SHIP_COEFFICIENT
    year = prod_date.year
    return round_half_up(100 * 80 * speed * k / (MAX_PROD_YEAR - year + 1)) / 100.0


def _check_text(field: str, value: Any) -> ValidationRejected | None:
    if not isinstance(value, str):
        return ValidationRejected(field, "must be a string")
    if not value:
        return ValidationRejected(field, "must not be empty")
    if len(value) > MAX_TEXT_LENGTH:
        return ValidationRejected(field, f"must be at most {MAX_TEXT_LENGTH} characters")
    return None


def _check_speed(value: Any) -> ValidationRejected | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return ValidationRejected("speed", "must be a number")
    if not (MIN_SPEED <= value <= MAX_SPEED):
        return ValidationRejected("speed", f"must be between {MIN_SPEED} and {MAX_SPEED}")
    return None


def _check_crew_size(value: Any) -> ValidationRejected | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return ValidationRejected("crew_size", "must be an integer")
    if not (MIN_CREW_SIZE <= value <= MAX_CREW_SIZE):
        return ValidationRejected("crew_size", f"must be between {MIN_CREW_SIZE} and {MAX_CREW_SIZE}")
    return None


def _check_prod_date(value: Any) -> ValidationRejected | None:
    if not isinstance(value, datetime):
        return ValidationRejected("prod_date", "must be a timestamp")
    if not (MIN_PROD_YEAR <= value.year <= MAX_PROD_YEAR):
        return ValidationRejected("prod_date", f"year must be between {MIN_PROD_YEAR} and {MAX_PROD_YEAR}")
    return None


def _coerce_ship_type(value: Any) -> ShipTypeEnum | None:
    if isinstance(value, ShipTypeEnum):
        return value
    try:
        return ShipTypeEnum(value)
    except ValueError:
        return None


def _check_ship_type(value: Any) -> ValidationRejected | None:
    if _coerce_ship_type(value) is None:
        valid = [e.value for e in ShipTypeEnum]
        return ValidationRejected("ship_type", f"must be one of: {valid}")
    return None


def _check_is_used(value: Any) -> ValidationRejected | None:
    if not isinstance(value, bool):
        return ValidationRejected("is_used", "must be a boolean")
    return None


_FIELD_CHECKS = {
    "name": lambda v: _check_text("name", v),
    "planet": lambda v: _check_text("planet", v),
    "crew_size": _check_crew_size,
    "speed": _check_speed,
    "prod_date": _check_prod_date,
    "is_used": _check_is_used,
    "ship_type": _check_ship_type,
}


def validate_for_create(candidate: dict[str, Any]) -> ValidationRejected | None:
    """Validate a new ship and fill in its derived fields.

    On success ``candidate`` is updated in place: is_used defaults to False,
    ship_type becomes a ShipTypeEnum, speed is rounded and rating attached.
    On failure ``candidate`` is left untouched.
    """
    if candidate.get("ship_type") is None:
        return ValidationRejected("ship_type", "is required")
    for field in ("name", "planet", "speed", "prod_date", "crew_size"):
        if candidate.get(field) is None:
            return ValidationRejected(field, "is required")

    for field in ("ship_type", "name", "planet", "speed", "prod_date", "crew_size"):
        error = _FIELD_CHECKS[field](candidate[field])
        if error:
            return error
    if candidate.get("is_used") is not None:
        error = _check_is_used(candidate["is_used"])
        if error:
            return error

    if candidate.get("is_used") is None:
        candidate["is_used"] = False
    candidate["ship_type"] = _coerce_ship_type(candidate["ship_type"])
    candidate["speed"] = round_speed(candidate["speed"])
    candidate["rating"] = compute_rating(
        candidate["speed"], candidate["is_used"], candidate["prod_date"]
    )
    return None


def validate_for_update(existing: Any, patch: dict[str, Any]) -> ValidationRejected | None:
    """Validate a partial update and, only if every supplied field passes, apply it.

    ``patch`` keys with a None value count as absent. The first failing field
    (in UPDATE_FIELD_ORDER) is returned and ``existing`` is not modified.
    """
    supplied = {k: v for k, v in patch.items() if k in _FIELD_CHECKS and v is not None}

    for field in UPDATE_FIELD_ORDER:
        if field in supplied:
            error = _FIELD_CHECKS[field](supplied[field])
            if error:
                logger.debug("Update rejected on %s: %s", field, error.reason)
                return error

    for field in UPDATE_FIELD_ORDER:
        if field not in supplied:
            continue
        value = supplied[field]
        if field == "speed":
            value = round_speed(value)
        elif field == "ship_type":
            value = _coerce_ship_type(value)
        setattr(existing, field, value)

    if RATING_INPUTS & supplied.keys():
        existing.rating = compute_rating(existing.speed, existing.is_used, existing.prod_date)
    return None
