from __future__ import annotations

import logging
import time
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from shipcatalog.config import settings
from shipcatalog.database import get_db
from shipcatalog.models.base import ShipTypeEnum
from shipcatalog.modules.ship_query import ShipCriteria, ShipOrder
from shipcatalog.modules.ship_service import (
    ShipNotFound,
    count_matching_ships,
    create_ship,
    delete_ship,
    get_ship,
    list_ships_page,
    update_ship,
)
from shipcatalog.modules.ship_validation import ValidationRejected
from shipcatalog.repository import ShipRepository
from shipcatalog.schemas.error import ErrorResponse
from shipcatalog.schemas.ship import ShipCreateRequest, ShipUpdateRequest, ship_to_dict
from shipcatalog.utils.ship_identity import parse_ship_id

logger = logging.getLogger(__name__)

router = APIRouter()

_ERROR_RESPONSES = {400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}


def get_repository(db: Session = Depends(get_db)) -> ShipRepository:
    return ShipRepository(db)


def ship_criteria(
    name: Optional[str] = Query(None),
    planet: Optional[str] = Query(None),
    ship_type: Optional[ShipTypeEnum] = Query(None, alias="shipType"),
    after: Optional[int] = Query(None, description="Earliest prodDate, epoch ms (inclusive)"),
    before: Optional[int] = Query(None, description="Latest prodDate, epoch ms (inclusive)"),
    is_used: Optional[bool] = Query(None, alias="isUsed"),
    min_speed: Optional[float] = Query(None, alias="minSpeed"),
    max_speed: Optional[float] = Query(None, alias="maxSpeed"),
    min_crew_size: Optional[int] = Query(None, alias="minCrewSize"),
    max_crew_size: Optional[int] = Query(None, alias="maxCrewSize"),
    min_rating: Optional[float] = Query(None, alias="minRating"),
    max_rating: Optional[float] = Query(None, alias="maxRating"),
) -> ShipCriteria:
    return ShipCriteria(
        name=name,
        planet=planet,
        ship_type=ship_type,
        after=after,
        before=before,
        is_used=is_used,
        min_speed=min_speed,
        max_speed=max_speed,
        min_crew_size=min_crew_size,
        max_crew_size=max_crew_size,
        min_rating=min_rating,
        max_rating=max_rating,
    )


def _require_ship_id(raw: str) -> int:
    ship_id = parse_ship_id(raw)
    if ship_id is None:
        raise HTTPException(status_code=400, detail=f"Invalid ship id: {raw!r}")
    return ship_id


def _rejected(error: ValidationRejected) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(detail=str(error), code="validation_rejected").model_dump(),
    )


def _not_found(ship_id: int) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Ship {ship_id} not found")


# ---------------------------------------------------------------------------
# Ships
# ---------------------------------------------------------------------------

@router.get("/ships", tags=["ships"])
def list_ships(
    criteria: ShipCriteria = Depends(ship_criteria),
    order: Optional[ShipOrder] = Query(None, description="Sort key: ID, SPEED, RATING or DATE"),
    page_number: Optional[int] = Query(None, alias="pageNumber"),
    page_size: Optional[int] = Query(None, alias="pageSize"),
    repo: ShipRepository = Depends(get_repository),
):
    """List ships matching the filters, sorted, one page at a time (default page 0, size 3)."""
    if page_size is None:
        page_size = settings.DEFAULT_PAGE_SIZE
    ships = list_ships_page(repo, criteria, order, page_number, page_size)
    return [ship_to_dict(s) for s in ships]


@router.get("/ships/count", tags=["ships"])
def count_ships(
    criteria: ShipCriteria = Depends(ship_criteria),
    repo: ShipRepository = Depends(get_repository),
) -> int:
    """Number of ships matching the filters, ignoring pagination."""
    return count_matching_ships(repo, criteria)


@router.post("/ships", tags=["ships"], responses=_ERROR_RESPONSES)
def create_ship_endpoint(body: ShipCreateRequest, repo: ShipRepository = Depends(get_repository)):
    """Create a ship. Rating is computed server-side."""
    try:
        values = body.to_values()
    except ValueError as e:
        return _rejected(ValidationRejected("prod_date", str(e)))

    result = create_ship(repo, values)
    if isinstance(result, ValidationRejected):
        return _rejected(result)
    return ship_to_dict(result)


@router.get("/ships/{ship_id}", tags=["ships"], responses=_ERROR_RESPONSES)
def get_ship_endpoint(ship_id: str, repo: ShipRepository = Depends(get_repository)):
    sid = _require_ship_id(ship_id)
    result = get_ship(repo, sid)
    if isinstance(result, ShipNotFound):
        raise _not_found(sid)
    return ship_to_dict(result)


@router.api_route("/ships/{ship_id}", methods=["POST", "PATCH"], tags=["ships"], responses=_ERROR_RESPONSES)
def update_ship_endpoint(
    ship_id: str,
    body: Optional[ShipUpdateRequest] = None,
    repo: ShipRepository = Depends(get_repository),
):
    """Partially update a ship. Nothing is changed if any supplied field is invalid."""
    sid = _require_ship_id(ship_id)
    if body is None:
        body = ShipUpdateRequest()
    try:
        patch = body.to_values(exclude_unset=True)
    except ValueError as e:
        return _rejected(ValidationRejected("prod_date", str(e)))

    result = update_ship(repo, sid, patch)
    if isinstance(result, ShipNotFound):
        raise _not_found(sid)
    if isinstance(result, ValidationRejected):
        return _rejected(result)
    return ship_to_dict(result)


@router.delete("/ships/{ship_id}", tags=["ships"], responses=_ERROR_RESPONSES)
def delete_ship_endpoint(ship_id: str, repo: ShipRepository = Depends(get_repository)):
    sid = _require_ship_id(ship_id)
    result = delete_ship(repo, sid)
    if isinstance(result, ShipNotFound):
        raise _not_found(sid)
    return {"status": "deleted", "id": sid}


# ---------------------------------------------------------------------------
# System / Health
# ---------------------------------------------------------------------------

@router.get("/health", tags=["system"])
def health_check(db: Session = Depends(get_db)):
    """Health check with DB latency measurement."""
    from sqlalchemy import text
    from sqlalchemy.exc import SQLAlchemyError

    t0 = time.time()
    try:
        db.execute(text("SELECT 1"))
        db_status = "ok"
    except SQLAlchemyError as e:
        logger.warning("Health check database error: %s", e)
        db_status = f"error: {e}"
    latency_ms = round((time.time() - t0) * 1000, 1)

    return {
        "status": "ok",
        "version": settings.VERSION,
        "database": {"status": db_status, "latency_ms": latency_ms},
    }
