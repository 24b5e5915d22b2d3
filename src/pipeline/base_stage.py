# src/pipeline/base_stage.py — v1
"""Shared run loop for the two analysis stages.

    validate -> fingerprint -> cache lookup -> (miss) invoke -> extract
    -> merge -> cache store -> result

Subclasses supply the stage-specific pieces: request preparation, the
semantic fields to fingerprint, the prompt, the schema and the failure
policy.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from nutriguard.cache.fingerprint import compute_fingerprint
from nutriguard.core.errors import AnalysisError, ExtractionError, InvocationError
from nutriguard.extraction.response_extractor import extract_json
from nutriguard.logging.context import set_stage_context
from nutriguard.pipeline.models import StageResult
from nutriguard.schemas.merger import SchemaSpec, check_required, merge

if TYPE_CHECKING:
    from nutriguard.cache.base_cache_store import BaseResultStore
    from nutriguard.llm.base_client import BaseLLMClient
    from nutriguard.llm.models import ImageInput
    from nutriguard.llm.retry import RetryingInvoker

logger = logging.getLogger(__name__)


class BaseAnalysisStage(ABC):
    """One cached, retried, schema-checked inference step."""

    system_prompt: str | None = None

    def __init__(
        self,
        llm: BaseLLMClient,
        invoker: RetryingInvoker,
        store: BaseResultStore | None = None,
        temperature: float = 0.2,
        max_tokens: int = 4096,
    ) -> None:
        self._llm = llm
        self._invoker = invoker
        self._store = store
        self._temperature = temperature
        self._max_tokens = max_tokens

    @property
    @abstractmethod
    def name(self) -> str:
        """Stage identifier used in logs and cache namespaces."""

    @property
    @abstractmethod
    def schema(self) -> SchemaSpec:
        """Payload schema this stage produces."""

    @abstractmethod
    def prepare(self, raw: Any) -> Any:
        """Validate the raw input and return the immutable stage request.

        Raises:
            ValidationError: If the input is not acceptable.
        """

    @abstractmethod
    def semantic_fields(self, request: Any) -> Any:
        """Exactly the inputs that determine the result."""

    @abstractmethod
    def build_prompt(self, request: Any) -> str:
        """Prompt text sent to the model."""

    def attachment(self, request: Any) -> ImageInput | None:
        """Binary attachment sent with the prompt, if any."""
        return None

    def short_circuit(self, request: Any) -> dict[str, Any] | None:
        """Fixed answer that skips cache and model entirely, or None."""
        return None

    def fallback(self, error: AnalysisError) -> dict[str, Any]:
        """Payload to return when inference or extraction fails.

        The default re-raises: a stage must opt in to degrading.
        """
        raise error

    async def run(self, raw: Any) -> StageResult:
        """Run the stage end to end for one request."""
        start = time.monotonic()
        set_stage_context(self.name)
        try:
            request = self.prepare(raw)

            fixed = self.short_circuit(request)
            if fixed is not None:
                logger.info("%s short-circuited without inference", self.name)
                return StageResult(data=fixed, processing_time_ms=_elapsed_ms(start))

            cache_key = compute_fingerprint(self.semantic_fields(request))

            if self._store is not None:
                cached = await self._store.get(cache_key)
                if cached is not None:
                    logger.info("%s cache hit %s", self.name, cache_key[:12])
                    return StageResult(
                        data=cached,
                        from_cache=True,
                        cache_key=cache_key,
                        processing_time_ms=_elapsed_ms(start),
                    )

            logger.info("%s cache miss %s, invoking model", self.name, cache_key[:12])
            try:
                payload = await self._analyze(request)
            except (InvocationError, ExtractionError) as exc:
                logger.error("%s failed: [%s] %s", self.name, exc.code.value, exc.message)
                data = self.fallback(exc)
                return StageResult(
                    data=data,
                    cache_key=cache_key,
                    processing_time_ms=_elapsed_ms(start),
                    degraded=True,
                    invoked=True,
                )

            if self._store is not None:
                await self._store.put(cache_key, payload)

            elapsed = _elapsed_ms(start)
            logger.info("%s completed in %dms", self.name, elapsed)
            return StageResult(
                data=payload,
                cache_key=cache_key,
                processing_time_ms=elapsed,
                invoked=True,
            )
        finally:
            set_stage_context(None)

    async def _analyze(self, request: Any) -> dict[str, Any]:
        prompt = self.build_prompt(request)
        image = self.attachment(request)

        raw_text = await self._invoker.invoke(
            lambda: self._llm.generate(
                prompt,
                image=image,
                system=self.system_prompt,
                max_tokens=self._max_tokens,
                temperature=self._temperature,
            )
        )
        extracted = extract_json(raw_text)
        check_required(extracted, self.schema)
        return merge(extracted, self.schema)


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)
