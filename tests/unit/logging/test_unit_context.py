# tests/unit/logging/test_unit_context.py — v2
"""Tests for logging/context.py — contextual logging variables."""

from __future__ import annotations

from nutriguard.logging.context import (
    clear_context,
    get_context,
    set_request_context,
    set_stage_context,
)


class TestLogContext:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_initial_state(self):
        ctx = get_context()
        assert ctx.request_id is None
        assert ctx.user_id is None
        assert ctx.stage is None

    def test_set_request_context(self):
        set_request_context("req1", "user1")
        ctx = get_context()
        assert ctx.request_id == "req1"
        assert ctx.user_id == "user1"

    def test_set_stage_context(self):
        set_stage_context("food_extraction")
        assert get_context().stage == "food_extraction"

    def test_as_dict_filters_none(self):
        set_request_context("req1")
        d = get_context().as_dict()
        assert d == {"request_id": "req1"}

    def test_clear(self):
        set_request_context("req1", "user1")
        set_stage_context("health_suitability")
        clear_context()
        ctx = get_context()
        assert ctx.request_id is None
        assert ctx.stage is None
