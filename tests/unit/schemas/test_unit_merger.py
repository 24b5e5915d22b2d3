# tests/unit/schemas/test_unit_merger.py — v1
"""Tests for schemas/merger.py — default merging, bounds, required fields."""

from __future__ import annotations

import math

import pytest

from nutriguard.core.errors import ErrorCode, ExtractionError
from nutriguard.schemas.food import FOOD_SCHEMA, default_food_data
from nutriguard.schemas.health import HEALTH_SCHEMA
from nutriguard.schemas.merger import Bound, check_required, merge


class TestBound:
    @pytest.mark.parametrize("value, expected", [
        (50, 50),
        (0, 0),
        (100, 100),
        (72.5, 72.5),
        ("85", 85),
        ("85%", 85),
        (" 60.5 ", 60.5),
    ])
    def test_accepted(self, value, expected):
        assert Bound(0, 100).coerce(value) == expected

    @pytest.mark.parametrize("value", [-1, 101, "high", None, True, math.nan, math.inf, [], {}])
    def test_rejected_to_floor(self, value):
        assert Bound(0, 100, floor=0).coerce(value) == 0
        assert Bound(0, 100, floor=None).coerce(value) is None


class TestMerge:
    def test_empty_input_gives_defaults(self):
        assert merge({}, FOOD_SCHEMA) == default_food_data()

    def test_none_input_gives_defaults(self):
        assert merge(None, FOOD_SCHEMA) == default_food_data()

    def test_nested_partial_object(self):
        merged = merge({"nutrition": {"calories": 200, "macros": {"protein": 5}}}, FOOD_SCHEMA)
        assert merged["nutrition"]["calories"] == 200
        assert merged["nutrition"]["macros"]["protein"] == 5
        assert merged["nutrition"]["macros"]["totalFat"] is None
        assert merged["nutrition"]["micronutrients"]["vitamins"] == []

    def test_extra_keys_preserved_at_every_depth(self):
        merged = merge(
            {"origin": "FR", "nutrition": {"macros": {"polyols": 3}}},
            FOOD_SCHEMA,
        )
        assert merged["origin"] == "FR"
        assert merged["nutrition"]["macros"]["polyols"] == 3

    def test_non_list_array_field_defaults(self):
        merged = merge({"allergens": "milk", "ingredients": None}, FOOD_SCHEMA)
        assert merged["allergens"] == []
        assert merged["ingredients"] == []

    def test_non_object_nested_field_defaults(self):
        merged = merge({"nutrition": "n/a"}, FOOD_SCHEMA)
        assert merged["nutrition"] == default_food_data()["nutrition"]

    def test_explicit_null_kept(self):
        merged = merge({"brand": None}, FOOD_SCHEMA)
        assert merged["brand"] is None

    def test_bounded_fields(self):
        merged = merge(
            {"confidence": 140, "healthMetrics": {"healthScore": "70", "novaGroup": 7}},
            FOOD_SCHEMA,
        )
        assert merged["confidence"] == 0
        assert merged["healthMetrics"]["healthScore"] == 70
        assert merged["healthMetrics"]["novaGroup"] is None

    def test_defaults_not_shared_between_calls(self):
        first = merge({}, FOOD_SCHEMA)
        first["ingredients"].append("oats")
        assert merge({}, FOOD_SCHEMA)["ingredients"] == []

    def test_open_nutrients_map_kept(self):
        merged = merge({"nutrients": {"sodium": {"amount": 95}}}, HEALTH_SCHEMA)
        assert merged["nutrients"] == {"sodium": {"amount": 95}}

    def test_default_payload(self):
        assert FOOD_SCHEMA.default_payload()["confidence"] == 0


class TestCheckRequired:
    def test_present(self):
        check_required({"recommendation": "recommended", "safetyScore": 0}, HEALTH_SCHEMA)

    @pytest.mark.parametrize("payload", [
        {"safetyScore": 50},
        {"recommendation": "recommended"},
        {"recommendation": "", "safetyScore": 50},
        {"recommendation": None, "safetyScore": None},
    ])
    def test_missing(self, payload):
        with pytest.raises(ExtractionError) as exc_info:
            check_required(payload, HEALTH_SCHEMA)
        assert exc_info.value.code is ErrorCode.INVALID_STRUCTURE

    def test_food_schema_requires_nothing(self):
        check_required({}, FOOD_SCHEMA)
