# src/llm/adapters/google_adapter.py — v2
"""Google Gemini adapter implementing BaseLLMClient.

Uses the google-generativeai SDK. Safety filters are relaxed so that
ingredient lists mentioning medications, alcohol etc. are not blocked.
"""

from __future__ import annotations

import time
from typing import Any

from nutriguard.llm.base_client import BaseLLMClient
from nutriguard.llm.models import ImageInput, LLMResponse, Message

SAFETY_SETTINGS: list[dict[str, str]] = [
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_SEXUALLY_EXPLICIT", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_NONE"},
]


class GoogleAdapter(BaseLLMClient):
    """Google Gemini adapter."""

    def __init__(
        self,
        model: str = "gemini-1.5-flash",
        api_key: str = "",
        top_p: float = 0.8,
        top_k: int = 40,
        **kwargs: Any,
    ):
        self._model = model
        self._api_key = api_key
        self._top_p = top_p
        self._top_k = top_k

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.2,
    ) -> LLMResponse:
        contents = []
        for m in messages:
            role = "model" if m.role == "assistant" else "user"
            contents.append({"role": role, "parts": [{"text": m.content}]})
        return await self._generate(contents, system, max_tokens, temperature)

    async def complete_with_vision(
        self,
        messages: list[Message],
        images: list[ImageInput],
        system: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.2,
    ) -> LLMResponse:
        parts: list[dict[str, Any]] = [{"text": m.content} for m in messages]
        for img in images:
            parts.append({"inline_data": {"mime_type": img.media_type, "data": img.data}})
        return await self._generate(parts, system, max_tokens, temperature)

    @property
    def supports_vision(self) -> bool:
        return True

    @property
    def provider_name(self) -> str:
        return "google"

    async def _generate(
        self,
        contents: list[dict[str, Any]],
        system: str | None,
        max_tokens: int,
        temperature: float,
    ) -> LLMResponse:
        import google.generativeai as genai

        genai.configure(api_key=self._api_key)
        model = genai.GenerativeModel(
            self._model,
            system_instruction=system,
            safety_settings=SAFETY_SETTINGS,
        )
        gen_config = {
            "max_output_tokens": max_tokens,
            "temperature": temperature,
            "top_p": self._top_p,
            "top_k": self._top_k,
        }

        t0 = time.monotonic()
        resp = await model.generate_content_async(contents, generation_config=gen_config)
        latency = int((time.monotonic() - t0) * 1000)

        usage = getattr(resp, "usage_metadata", None)
        return LLMResponse(
            content=resp.text or "",
            input_tokens=getattr(usage, "prompt_token_count", 0) if usage else 0,
            output_tokens=getattr(usage, "candidates_token_count", 0) if usage else 0,
            model=self._model,
            provider="google",
            latency_ms=latency,
            raw_response=resp,
        )
