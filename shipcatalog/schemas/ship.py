"""Pydantic schemas for the Ship entity — used by FastAPI for request/response typing.

Field bounds are deliberately not declared here: ship_validation owns them so
that an out-of-range value is a 400 rejection naming the field, for both the
API and the seed loader. JSON keys are camelCase; prodDate is epoch
milliseconds. Request schemas have no rating field, so a supplied rating is
dropped.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_serializer
from pydantic.alias_generators import to_camel

from shipcatalog.models.base import ShipTypeEnum
from shipcatalog.utils.epoch import from_epoch_ms, to_epoch_ms


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ShipWriteRequest(_CamelModel):
    name: Optional[str] = None
    planet: Optional[str] = None
    ship_type: Optional[str] = None
    prod_date: Optional[int] = None
    is_used: Optional[bool] = None
    speed: Optional[float] = None
    crew_size: Optional[int] = None

    def to_values(self, exclude_unset: bool = False) -> dict[str, Any]:
        """Snake_case field dict with prod_date as a datetime.

        Raises ValueError if prod_date cannot be represented.
        """
        values = self.model_dump(exclude_unset=exclude_unset)
        if values.get("prod_date") is not None:
            values["prod_date"] = from_epoch_ms(values["prod_date"])
        return values


class ShipCreateRequest(ShipWriteRequest):
    pass


class ShipUpdateRequest(ShipWriteRequest):
    pass


class ShipRead(_CamelModel):
    id: int
    name: str
    planet: str
    ship_type: ShipTypeEnum
    prod_date: datetime
    is_used: bool
    speed: float
    crew_size: int
    rating: float

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    @field_serializer("prod_date")
    def _prod_date_ms(self, value: datetime) -> int:
        return to_epoch_ms(value)


def ship_to_dict(ship: Any) -> dict[str, Any]:
    return ShipRead.model_validate(ship).model_dump(by_alias=True, mode="json")
