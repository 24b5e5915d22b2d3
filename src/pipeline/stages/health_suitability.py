# src/pipeline/stages/health_suitability.py — v1
"""Stage 2: judge food data against the user's health conditions.

No degradation here. A fabricated safety recommendation is worse than an
error, so inference and extraction failures propagate to the caller.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from nutriguard.cache.fingerprint import health_semantic_fields
from nutriguard.core.errors import ErrorCode, ValidationError
from nutriguard.pipeline.base_stage import BaseAnalysisStage
from nutriguard.pipeline.models import HealthAnalysisRequest
from nutriguard.prompts.health_analysis import SYSTEM_PROMPT, build_health_prompt
from nutriguard.schemas.health import HEALTH_SCHEMA, no_health_data_result
from nutriguard.schemas.merger import SchemaSpec


class HealthSuitabilityStage(BaseAnalysisStage):
    """Food data + conditions -> health report payload."""

    system_prompt = SYSTEM_PROMPT

    @property
    def name(self) -> str:
        return "health_suitability"

    @property
    def schema(self) -> SchemaSpec:
        return HEALTH_SCHEMA

    def prepare(self, raw: HealthAnalysisRequest) -> HealthAnalysisRequest:
        if not isinstance(raw, HealthAnalysisRequest) or not isinstance(raw.food_data, Mapping):
            raise ValidationError(ErrorCode.INVALID_FOOD_DATA, "Food data must be an object")
        return raw

    def short_circuit(self, request: HealthAnalysisRequest) -> dict[str, Any] | None:
        if not request.conditions:
            return no_health_data_result()
        return None

    def semantic_fields(self, request: HealthAnalysisRequest) -> dict[str, Any]:
        return health_semantic_fields(request.food_data, request.conditions)

    def build_prompt(self, request: HealthAnalysisRequest) -> str:
        return build_health_prompt(request.food_data, request.conditions)
