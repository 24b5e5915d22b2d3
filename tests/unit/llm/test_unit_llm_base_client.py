# tests/unit/llm/test_unit_llm_base_client.py — v2
"""Tests for llm/base_client.py — ABC contract and generate() routing."""

from __future__ import annotations

import pytest

from nutriguard.llm.base_client import BaseLLMClient
from nutriguard.llm.models import ImageInput, LLMResponse


class _FakeClient(BaseLLMClient):
    def __init__(self, vision: bool = True) -> None:
        self._model = "fake-1"
        self._vision = vision
        self.calls: list[tuple] = []

    async def complete(self, messages, system=None, max_tokens=4096, temperature=0.2):
        self.calls.append(("text", messages, system, max_tokens, temperature))
        return LLMResponse(content="text-out", model=self._model, provider="fake", latency_ms=1)

    async def complete_with_vision(
        self, messages, images, system=None, max_tokens=4096, temperature=0.2,
    ):
        self.calls.append(("vision", messages, images, system, max_tokens, temperature))
        return LLMResponse(content="vision-out", model=self._model, provider="fake", latency_ms=1)

    @property
    def supports_vision(self):
        return self._vision

    @property
    def provider_name(self):
        return "fake"


class TestBaseLLMClient:
    def test_cannot_instantiate(self):
        with pytest.raises(TypeError):
            BaseLLMClient()  # type: ignore[abstract]

    def test_model_name(self):
        assert _FakeClient().model_name == "fake-1"


class TestGenerate:
    @pytest.mark.asyncio
    async def test_text_only(self):
        client = _FakeClient()
        out = await client.generate("hi", system="sys", max_tokens=100, temperature=0.1)
        assert out == "text-out"
        kind, messages, system, max_tokens, temperature = client.calls[0]
        assert kind == "text"
        assert messages[0].content == "hi"
        assert (system, max_tokens, temperature) == ("sys", 100, 0.1)

    @pytest.mark.asyncio
    async def test_with_image(self):
        client = _FakeClient()
        image = ImageInput(data=b"img", media_type="image/png")
        assert await client.generate("read", image=image) == "vision-out"
        assert client.calls[0][2] == [image]

    @pytest.mark.asyncio
    async def test_image_without_vision(self):
        client = _FakeClient(vision=False)
        with pytest.raises(ValueError, match="does not support images"):
            await client.generate("read", image=ImageInput(data=b"x", media_type="image/png"))
