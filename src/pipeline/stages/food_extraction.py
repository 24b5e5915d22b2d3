# src/pipeline/stages/food_extraction.py — v1
"""Stage 1: read structured food data off a label photograph.

Degrades instead of failing: if the model cannot be reached or its answer
cannot be parsed, the request still succeeds with an all-null payload so
the health stage can run on whatever is known.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from nutriguard.core.errors import AnalysisError
from nutriguard.core.models import UploadedFile
from nutriguard.pipeline.base_stage import BaseAnalysisStage
from nutriguard.pipeline.models import FoodImageRequest
from nutriguard.pipeline.upload import UploadLimits, read_upload
from nutriguard.prompts.food_extraction import SYSTEM_PROMPT, build_food_prompt
from nutriguard.schemas.food import FOOD_SCHEMA
from nutriguard.schemas.merger import SchemaSpec

if TYPE_CHECKING:
    from nutriguard.llm.models import ImageInput

logger = logging.getLogger(__name__)


class FoodExtractionStage(BaseAnalysisStage):
    """Image -> food-data payload."""

    system_prompt = SYSTEM_PROMPT

    def __init__(self, *args: Any, limits: UploadLimits | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._limits = limits or UploadLimits()

    @property
    def name(self) -> str:
        return "food_extraction"

    @property
    def schema(self) -> SchemaSpec:
        return FOOD_SCHEMA

    def prepare(self, raw: UploadedFile | None) -> FoodImageRequest:
        image = read_upload(raw, self._limits)
        logger.info("File validation passed: %s", image.source_id)
        return FoodImageRequest(image=image, filename=image.source_id or "")

    def semantic_fields(self, request: FoodImageRequest) -> bytes:
        return request.image.data

    def build_prompt(self, request: FoodImageRequest) -> str:
        return build_food_prompt()

    def attachment(self, request: FoodImageRequest) -> ImageInput:
        return request.image

    def fallback(self, error: AnalysisError) -> dict[str, Any]:
        logger.warning("Returning default food data after [%s]", error.code.value)
        return FOOD_SCHEMA.default_payload()
