"""Ship storage over a SQLAlchemy session."""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from shipcatalog.models.ship import Ship

logger = logging.getLogger(__name__)


class ShipRepository:
    """Point operations plus a full scan; the only owner of ship identity."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def find_all(self) -> list[Ship]:
        return self.db.query(Ship).order_by(Ship.id).all()

    def find_by_id(self, ship_id: int) -> Optional[Ship]:
        return self.db.query(Ship).filter(Ship.id == ship_id).first()

    def exists_by_id(self, ship_id: int) -> bool:
        return self.db.query(Ship.id).filter(Ship.id == ship_id).first() is not None

    def save(self, ship: Ship) -> Ship:
        self.db.add(ship)
        self.db.commit()
        self.db.refresh(ship)
        return ship

    def delete_by_id(self, ship_id: int) -> None:
        ship = self.find_by_id(ship_id)
        if ship is None:
            return
        self.db.delete(ship)
        self.db.commit()
