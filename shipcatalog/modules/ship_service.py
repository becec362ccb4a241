"""Ship catalogue operations: create, get, update, delete, list, count.

Writes pass through ship_validation, reads through ship_query. Outcomes are
returned as values (Ship, ValidationRejected, ShipNotFound, ShipDeleted); the
HTTP layer decides the status code.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from shipcatalog.models.ship import Ship
from shipcatalog.modules.ship_query import (
    ShipCriteria,
    ShipOrder,
    count_ships,
    list_ships,
)
from shipcatalog.modules.ship_validation import (
    ValidationRejected,
    validate_for_create,
    validate_for_update,
)
from shipcatalog.repository import ShipRepository

logger = logging.getLogger(__name__)

_SHIP_FIELDS = ("name", "planet", "ship_type", "prod_date", "is_used", "speed", "crew_size", "rating")


@dataclass(frozen=True)
class ShipNotFound:
    ship_id: int


@dataclass(frozen=True)
class ShipDeleted:
    ship_id: int


def create_ship(repo: ShipRepository, candidate: dict[str, Any]) -> Ship | ValidationRejected:
    values = dict(candidate)
    values.pop("id", None)
    error = validate_for_create(values)
    if error:
        logger.info("Create rejected: %s", error)
        return error
    ship = repo.save(Ship(**{k: values[k] for k in _SHIP_FIELDS}))
    logger.info("Created ship %d (%s), rating=%.2f", ship.id, ship.name, ship.rating)
    return ship


def get_ship(repo: ShipRepository, ship_id: int) -> Ship | ShipNotFound:
    ship = repo.find_by_id(ship_id)
    if ship is None:
        return ShipNotFound(ship_id)
    return ship


def update_ship(
    repo: ShipRepository, ship_id: int, patch: dict[str, Any]
) -> Ship | ShipNotFound | ValidationRejected:
    if not repo.exists_by_id(ship_id):
        return ShipNotFound(ship_id)
    ship = repo.find_by_id(ship_id)
    error = validate_for_update(ship, patch)
    if error:
        logger.info("Update of ship %d rejected: %s", ship_id, error)
        return error
    ship = repo.save(ship)
    logger.info("Updated ship %d, rating=%.2f", ship.id, ship.rating)
    return ship


def delete_ship(repo: ShipRepository, ship_id: int) -> ShipDeleted | ShipNotFound:
    if not repo.exists_by_id(ship_id):
        return ShipNotFound(ship_id)
    repo.delete_by_id(ship_id)
    logger.info("Deleted ship %d", ship_id)
    return ShipDeleted(ship_id)


def list_ships_page(
    repo: ShipRepository,
    criteria: ShipCriteria | None = None,
    order: ShipOrder | None = None,
    page_number: int | None = None,
    page_size: int | None = None,
) -> list[Ship]:
    return list_ships(repo.find_all(), criteria, order, page_number, page_size)


def count_matching_ships(repo: ShipRepository, criteria: ShipCriteria | None = None) -> int:
    return count_ships(repo.find_all(), criteria)
