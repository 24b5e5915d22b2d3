# src/api/facade.py — v2
"""Public API facade: the two analysis entry points.

Usage:
    from nutriguard.api.facade import NutriGuard
    guard = NutriGuard.from_settings()
    response = await guard.analyze_health(upload, user_id="u1")

The facade owns request ids, timing, upload cleanup and envelope building.
Stage logic lives in nutriguard.pipeline.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from nutriguard.api.models import AnalysisResponse, ErrorBody, ResponseMetadata
from nutriguard.cache.cache_factory import create_result_store
from nutriguard.config.settings import Settings
from nutriguard.core.errors import AnalysisError, DatabaseError, ErrorCode, ValidationError
from nutriguard.llm.retry import RetryingInvoker, RetryPolicy
from nutriguard.logging.context import clear_context, set_request_context
from nutriguard.pipeline.models import HealthAnalysisRequest, StageResult
from nutriguard.pipeline.stages.food_extraction import FoodExtractionStage
from nutriguard.pipeline.stages.health_suitability import HealthSuitabilityStage
from nutriguard.pipeline.upload import UploadLimits, consume_upload
from nutriguard.schemas.food import FOOD_SCHEMA_VERSION
from nutriguard.schemas.health import HEALTH_SCHEMA_VERSION

if TYPE_CHECKING:
    from nutriguard.cache.base_cache_store import BaseResultStore
    from nutriguard.core.models import HealthCondition, UploadedFile
    from nutriguard.llm.base_client import BaseLLMClient
    from nutriguard.profile.base_profile_store import BaseProfileStore

logger = logging.getLogger(__name__)

_CONDITION_FIELDS = {"id", "name", "severity", "type", "status"}


class NutriGuard:
    """Food-label analysis with health-suitability checks.

    Args:
        llm: Inference client, shared by both stages.
        settings: Application settings. Loaded from .env if None.
        profile_store: Source of users' health conditions. Defaults to
            JSON profiles under settings.profile_root.
        food_store: Result store for stage 1. Built from settings if None.
        health_store: Result store for stage 2. Built from settings if None.
        sleep: Backoff sleep, replaceable in tests.
    """

    def __init__(
        self,
        llm: BaseLLMClient,
        settings: Settings | None = None,
        profile_store: BaseProfileStore | None = None,
        food_store: BaseResultStore | None = None,
        health_store: BaseResultStore | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        settings = settings or Settings()
        self._settings = settings
        self._llm = llm

        if profile_store is None:
            from nutriguard.profile.json_profile_store import JsonProfileStore
            profile_store = JsonProfileStore(settings.profile_root)
        self._profile_store = profile_store

        if food_store is None:
            food_store = create_result_store("food", FOOD_SCHEMA_VERSION, settings)
        if health_store is None:
            health_store = create_result_store("health", HEALTH_SCHEMA_VERSION, settings)

        self.food_stage = FoodExtractionStage(
            llm,
            RetryingInvoker(
                RetryPolicy(
                    max_retries=settings.food_max_retries,
                    base_delay_s=settings.food_retry_delay_s,
                    timeout_s=settings.food_timeout_s,
                ),
                name="food extraction",
                sleep=sleep,
            ),
            store=food_store,
            temperature=settings.food_temperature,
            max_tokens=settings.food_max_tokens,
            limits=UploadLimits.from_settings(settings),
        )
        self.health_stage = HealthSuitabilityStage(
            llm,
            RetryingInvoker(
                RetryPolicy(
                    max_retries=settings.health_max_retries,
                    base_delay_s=settings.health_retry_delay_s,
                    timeout_s=settings.health_timeout_s,
                ),
                name="health analysis",
                sleep=sleep,
            ),
            store=health_store,
            temperature=settings.health_temperature,
            max_tokens=settings.health_max_tokens,
        )

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **kwargs: Any) -> NutriGuard:
        """Build the facade with the LLM client configured in settings."""
        from nutriguard.llm.client_factory import create_llm_client

        settings = settings or Settings()
        return cls(create_llm_client(settings=settings), settings=settings, **kwargs)

    async def analyze_food(
        self,
        upload: UploadedFile | None,
        request_id: str | None = None,
    ) -> AnalysisResponse:
        """Extract food data from a label photo. The upload file is always removed."""
        request_id = request_id or new_request_id()
        start = time.monotonic()
        set_request_context(request_id)
        logger.info("Processing image data started")
        try:
            with consume_upload(upload):
                result = await self.food_stage.run(upload)
            return self._success(result.data, result, start, request_id)
        except AnalysisError as exc:
            return self._failure(exc, start, request_id)
        finally:
            clear_context()

    async def analyze_health(
        self,
        upload: UploadedFile | None,
        user_id: str | None,
        request_id: str | None = None,
    ) -> AnalysisResponse:
        """Run both stages: label photo -> food data -> suitability for ``user_id``."""
        request_id = request_id or new_request_id()
        start = time.monotonic()
        set_request_context(request_id, user_id)
        logger.info("Health analysis request started")
        try:
            with consume_upload(upload):
                if not user_id:
                    raise ValidationError(ErrorCode.MISSING_USER, "A user id is required")
                food = await self.food_stage.run(upload)
            logger.info("Food analysis completed: %s", food.data.get("productName"))

            conditions = await self._fetch_conditions(user_id)
            result = await self.health_stage.run(
                HealthAnalysisRequest(food_data=food.data, conditions=conditions)
            )

            data = {**result.data, "foodData": food.data}
            if conditions:
                data["userConditions"] = [
                    c.model_dump(include=_CONDITION_FIELDS) for c in conditions
                ]
            return self._success(data, result, start, request_id, user_id=user_id)
        except AnalysisError as exc:
            return self._failure(exc, start, request_id, user_id=user_id)
        finally:
            clear_context()

    async def _fetch_conditions(self, user_id: str) -> list[HealthCondition]:
        try:
            return await self._profile_store.get_health_conditions(user_id)
        except Exception as exc:
            raise DatabaseError(
                ErrorCode.USER_HEALTH_FETCH_ERROR,
                f"Failed to fetch user health conditions: {exc}",
            ) from exc

    def _success(
        self,
        data: dict[str, Any],
        result: StageResult,
        start: float,
        request_id: str,
        user_id: str | None = None,
    ) -> AnalysisResponse:
        elapsed = _elapsed_ms(start)
        logger.info(
            "Request completed (%dms, from_cache=%s, degraded=%s)",
            elapsed, result.from_cache, result.degraded,
        )
        return AnalysisResponse(
            success=True,
            data=data,
            metadata=ResponseMetadata(
                from_cache=result.from_cache,
                processing_time_ms=elapsed,
                request_id=request_id,
                cache_key=result.cache_key,
                timestamp=_now_iso(),
                model=self._llm.model_name,
                degraded=result.degraded or None,
                user_id=user_id,
            ),
        )

    def _failure(
        self,
        exc: AnalysisError,
        start: float,
        request_id: str,
        user_id: str | None = None,
    ) -> AnalysisResponse:
        elapsed = _elapsed_ms(start)
        logger.error(
            "Request failed (%dms): [%s] %s", elapsed, exc.code.value, exc.message,
            exc_info=exc.__cause__ is not None and logger.isEnabledFor(logging.DEBUG),
        )
        return AnalysisResponse(
            success=False,
            error=ErrorBody(**exc.to_dict()),
            metadata=ResponseMetadata(
                processing_time_ms=elapsed,
                request_id=request_id,
                timestamp=_now_iso(),
                user_id=user_id,
            ),
            status_code=exc.http_status,
        )


def new_request_id() -> str:
    """Opaque correlation id for one request."""
    return uuid.uuid4().hex


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)
