"""Tests for ship validation and rating (ship_validation.py).

Covers:
- rating formula, including round-half-up on the scaled value
- speed rounding and its idempotence
- create: required fields, bounds, is_used default, rating overwrite
- update: all-or-nothing application, rating recomputation
"""
from datetime import datetime
from types import SimpleNamespace

import pytest

from conftest import valid_candidate
from shipcatalog.models.base import ShipTypeEnum
from shipcatalog.modules.ship_validation import (
    ValidationRejected,
    compute_rating,
    round_speed,
    validate_for_create,
    validate_for_update,
)


def _existing(**overrides):
    fields = dict(
        id=1, name="Ava", planet="Earth", ship_type=ShipTypeEnum.TRANSPORT,
        prod_date=datetime(3000, 1, 1), is_used=False, speed=0.5, crew_size=100, rating=2.0,
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


# =====================================================================
# Rating
# =====================================================================

class TestComputeRating:
    def test_new_ship(self):
        """8000 * 0.5 * 1.0 / 20 = 200 → 2.00"""
        assert compute_rating(0.5, False, datetime(3000, 1, 1)) == 2.0

    def test_used_ship_halves_rating(self):
        """8000 * 0.5 * 0.5 / 20 = 100 → 1.00"""
        assert compute_rating(0.5, True, datetime(3000, 1, 1)) == 1.0

    def test_latest_year_divides_by_one(self):
        assert compute_rating(0.5, False, datetime(3019, 12, 31)) == 40.0

    def test_rounds_once_after_scaling(self):
        """8000 * 0.25 / 11 = 181.81… → 182 → 1.82"""
        assert compute_rating(0.25, False, datetime(3009, 1, 1)) == 1.82

    def test_half_rounds_up(self):
        """8000 * 0.5 * 0.5 / 160 = 12.5 → 13 (banker's rounding would give 12)."""
        assert compute_rating(0.5, True, datetime(2860, 1, 1)) == 0.13

    def test_only_year_matters(self):
        assert compute_rating(0.5, False, datetime(3000, 1, 1)) == compute_rating(
            0.5, False, datetime(3000, 12, 31, 23, 59)
        )


class TestRoundSpeed:
    def test_half_rounds_up(self):
        assert round_speed(0.125) == 0.13

    def test_rounds_down_below_half(self):
        assert round_speed(0.5049) == 0.5

    @pytest.mark.parametrize("speed", [0.01, 0.1, 0.29, 0.33, 0.57, 0.7, 0.99])
    def test_idempotent_on_two_decimals(self, speed):
        assert round_speed(speed) == speed
        assert round_speed(round_speed(speed)) == speed


# =====================================================================
# Create
# =====================================================================

class TestValidateForCreate:
    def test_valid_candidate_gets_rating(self):
        candidate = valid_candidate()
        assert validate_for_create(candidate) is None
        assert candidate["rating"] == 2.0

    def test_used_candidate_rating(self):
        candidate = valid_candidate(is_used=True)
        assert validate_for_create(candidate) is None
        assert candidate["rating"] == 1.0

    def test_is_used_defaults_to_false(self):
        candidate = valid_candidate()
        del candidate["is_used"]
        assert validate_for_create(candidate) is None
        assert candidate["is_used"] is False

    def test_speed_rounded_before_rating(self):
        candidate = valid_candidate(speed=0.125)
        assert validate_for_create(candidate) is None
        assert candidate["speed"] == 0.13
        assert candidate["rating"] == compute_rating(0.13, False, datetime(3000, 1, 1))

    @pytest.mark.parametrize("speed,year,used", [
        (0.01, 2800, False),
        (0.99, 3019, True),
        (0.456, 2950, False),
        (0.333, 3015, True),
    ])
    def test_rating_matches_formula_on_rounded_speed(self, speed, year, used):
        candidate = valid_candidate(speed=speed, prod_date=datetime(year, 6, 1), is_used=used)
        assert validate_for_create(candidate) is None
        assert candidate["rating"] == compute_rating(round_speed(speed), used, datetime(year, 1, 1))

    def test_caller_rating_is_overwritten(self):
        candidate = valid_candidate(rating=99.0)
        assert validate_for_create(candidate) is None
        assert candidate["rating"] == 2.0

    def test_ship_type_string_coerced(self):
        candidate = valid_candidate(ship_type="MILITARY")
        assert validate_for_create(candidate) is None
        assert candidate["ship_type"] is ShipTypeEnum.MILITARY

    @pytest.mark.parametrize("field", ["ship_type", "name", "planet", "speed", "prod_date", "crew_size"])
    def test_missing_required_field_rejected(self, field):
        candidate = valid_candidate()
        del candidate[field]
        error = validate_for_create(candidate)
        assert isinstance(error, ValidationRejected)
        assert error.field == field

    @pytest.mark.parametrize("overrides,field", [
        ({"name": ""}, "name"),
        ({"name": "x" * 51}, "name"),
        ({"planet": ""}, "planet"),
        ({"planet": "p" * 51}, "planet"),
        ({"speed": 0.0}, "speed"),
        ({"speed": 0.009}, "speed"),
        ({"speed": 0.991}, "speed"),
        ({"speed": 1.5}, "speed"),
        ({"prod_date": datetime(2799, 12, 31)}, "prod_date"),
        ({"prod_date": datetime(3020, 1, 1)}, "prod_date"),
        ({"crew_size": 0}, "crew_size"),
        ({"crew_size": 10000}, "crew_size"),
        ({"ship_type": "SPACESHIP"}, "ship_type"),
    ])
    def test_out_of_bounds_rejected(self, overrides, field):
        candidate = valid_candidate(**overrides)
        before = dict(candidate)
        error = validate_for_create(candidate)
        assert isinstance(error, ValidationRejected)
        assert error.field == field
        assert candidate == before
        assert "rating" not in candidate

    @pytest.mark.parametrize("overrides", [
        {"name": "x" * 50},
        {"planet": "p"},
        {"speed": 0.01},
        {"speed": 0.99},
        {"prod_date": datetime(2800, 1, 1)},
        {"prod_date": datetime(3019, 12, 31)},
        {"crew_size": 1},
        {"crew_size": 9999},
    ])
    def test_bounds_are_inclusive(self, overrides):
        assert validate_for_create(valid_candidate(**overrides)) is None

    def test_ship_type_checked_first(self):
        candidate = valid_candidate(name="", ship_type=None)
        assert validate_for_create(candidate).field == "ship_type"


# =====================================================================
# Update
# =====================================================================

class TestValidateForUpdate:
    def test_empty_patch_changes_nothing(self):
        ship = _existing()
        before = vars(ship).copy()
        assert validate_for_update(ship, {}) is None
        assert vars(ship) == before

    def test_none_values_are_ignored(self):
        ship = _existing()
        assert validate_for_update(ship, {"name": None, "speed": None}) is None
        assert ship.name == "Ava"
        assert ship.speed == 0.5

    def test_out_of_range_speed_rejected_without_mutation(self):
        ship = _existing()
        before = vars(ship).copy()
        error = validate_for_update(ship, {"speed": 1.5})
        assert error == ValidationRejected("speed", error.reason)
        assert vars(ship) == before

    def test_failure_after_valid_field_applies_nothing(self):
        """name passes and precedes speed in check order, but must not be applied."""
        ship = _existing()
        error = validate_for_update(ship, {"name": "Renamed", "planet": "Mars", "speed": 1.5})
        assert error.field == "speed"
        assert ship.name == "Ava"
        assert ship.planet == "Earth"

    def test_first_failing_field_in_order_reported(self):
        ship = _existing()
        error = validate_for_update(ship, {"prod_date": datetime(2000, 1, 1), "crew_size": 0})
        assert error.field == "crew_size"

    def test_name_only_keeps_rating(self):
        ship = _existing(rating=7.77)
        assert validate_for_update(ship, {"name": "Renamed"}) is None
        assert ship.name == "Renamed"
        assert ship.rating == 7.77

    def test_speed_change_recomputes_rating(self):
        ship = _existing()
        assert validate_for_update(ship, {"speed": 0.25}) is None
        assert ship.speed == 0.25
        assert ship.rating == 1.0

    def test_speed_rounded_on_update(self):
        ship = _existing()
        assert validate_for_update(ship, {"speed": 0.125}) is None
        assert ship.speed == 0.13

    def test_is_used_change_recomputes_rating(self):
        ship = _existing()
        assert validate_for_update(ship, {"is_used": True}) is None
        assert ship.rating == 1.0

    def test_prod_date_change_recomputes_rating(self):
        ship = _existing()
        assert validate_for_update(ship, {"prod_date": datetime(3019, 1, 1)}) is None
        assert ship.rating == 40.0

    def test_ship_type_updated(self):
        ship = _existing()
        assert validate_for_update(ship, {"ship_type": "MERCHANT"}) is None
        assert ship.ship_type is ShipTypeEnum.MERCHANT

    def test_unknown_ship_type_rejected(self):
        ship = _existing()
        error = validate_for_update(ship, {"name": "X", "ship_type": "BARGE"})
        assert error.field == "ship_type"
        assert ship.name == "Ava"

    def test_rating_in_patch_ignored(self):
        ship = _existing()
        assert validate_for_update(ship, {"rating": 50.0}) is None
        assert ship.rating == 2.0
