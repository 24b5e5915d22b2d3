# src/llm/base_client.py — v2
"""Abstract LLM client interface.

The analysis stages only need ``generate``: one prompt, an optional image,
raw text back. Adapters implement the two completion primitives.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from nutriguard.llm.models import ImageInput, LLMResponse, Message


class BaseLLMClient(ABC):
    """Unified interface for all LLM providers."""

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.2,
    ) -> LLMResponse:
        """Text completion."""

    @abstractmethod
    async def complete_with_vision(
        self,
        messages: list[Message],
        images: list[ImageInput],
        system: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.2,
    ) -> LLMResponse:
        """Vision-enabled completion (images + text)."""

    @property
    @abstractmethod
    def supports_vision(self) -> bool:
        """Whether this provider/model supports image inputs."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (google, anthropic)."""

    @property
    def model_name(self) -> str:
        return getattr(self, "_model", "unknown")

    async def generate(
        self,
        prompt: str,
        image: ImageInput | None = None,
        system: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.2,
    ) -> str:
        """Send one prompt (plus optional image) and return the raw text."""
        messages = [Message(role="user", content=prompt)]
        if image is None:
            response = await self.complete(
                messages, system=system, max_tokens=max_tokens, temperature=temperature,
            )
        else:
            if not self.supports_vision:
                raise ValueError(f"Provider {self.provider_name!r} does not support images")
            response = await self.complete_with_vision(
                messages, [image], system=system,
                max_tokens=max_tokens, temperature=temperature,
            )
        return response.content
