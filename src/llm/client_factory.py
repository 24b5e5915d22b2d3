# src/llm/client_factory.py — v4
"""Factory: instantiate an LLM client from provider name.

Called once at startup; the resulting client is passed explicitly into the
analysis facade rather than held in module state.
"""

from __future__ import annotations

import importlib
import logging

from nutriguard.config.settings import Settings
from nutriguard.llm.base_client import BaseLLMClient

logger = logging.getLogger(__name__)

# Registry of provider name → adapter class path (lazy import).
_PROVIDER_REGISTRY: dict[str, str] = {
    "google": "nutriguard.llm.adapters.google_adapter.GoogleAdapter",
    "anthropic": "nutriguard.llm.adapters.anthropic_adapter.AnthropicAdapter",
}


class UnsupportedProviderError(ValueError):
    """Raised when a provider is not registered."""


def create_llm_client(
    provider: str | None = None,
    model: str | None = None,
    settings: Settings | None = None,
    **kwargs: object,
) -> BaseLLMClient:
    """Instantiate the adapter for ``provider``.

    Args:
        provider: Provider identifier. Defaults to settings.llm_provider.
        model: Model name. Defaults to settings.llm_model.
        settings: Application settings (for API keys and defaults).
        **kwargs: Additional provider-specific arguments.

    Raises:
        UnsupportedProviderError: If provider is not registered.
    """
    settings = settings or Settings()
    provider = provider or settings.llm_provider
    model = model or settings.llm_model

    if provider not in _PROVIDER_REGISTRY:
        raise UnsupportedProviderError(
            f"Unsupported LLM provider: {provider!r}. "
            f"Available: {', '.join(sorted(_PROVIDER_REGISTRY))}"
        )

    adapter_cls = _import_class(_PROVIDER_REGISTRY[provider])

    init_kwargs = dict(kwargs)
    init_kwargs["model"] = model
    if provider == "google":
        init_kwargs.setdefault("api_key", settings.google_api_key)
    elif provider == "anthropic":
        init_kwargs.setdefault("api_key", settings.anthropic_api_key)

    logger.debug("Creating LLM client: provider=%s, model=%s", provider, model)
    return adapter_cls(**init_kwargs)


def _import_class(class_path: str) -> type:
    """Dynamically import a class from its fully qualified path."""
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)
