# tests/conftest.py — v2
"""Shared test fixtures for all unit and integration tests.

Provides a mock LLM client, settings pointed at temp directories, label
photo uploads and canned model answers. No network: all inference is mocked.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable
from unittest.mock import AsyncMock

import pytest

from nutriguard.config.settings import Settings
from nutriguard.core.models import HealthCondition, UploadedFile

# Minimal PNG signature plus padding; the model never sees real pixels in tests.
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


# === FIXTURES: Canned model output ===


@pytest.fixture
def food_payload() -> dict:
    """Food data as a well-behaved model would return it."""
    return {
        "productName": "Crunchy Oat Bar",
        "brand": "Acme",
        "category": "snack",
        "ingredients": [
            {"name": "oats", "order": 1, "isAllergen": False,
             "isAdditive": False, "isSugar": False, "concerns": []},
            {"name": "glucose syrup", "order": 2, "isAllergen": False,
             "isAdditive": False, "isSugar": True, "concerns": ["added sugar"]},
        ],
        "nutrition": {
            "servingSize": "40 g",
            "servingsPerContainer": 6,
            "calories": 180,
            "macros": {"protein": 4, "totalCarbs": 28, "totalSugars": 12, "totalFat": 6},
            "micronutrients": {"sodium": 95},
        },
        "allergens": ["gluten"],
        "healthMetrics": {"healthScore": 55, "novaGroup": 4},
        "confidence": 88,
    }


@pytest.fixture
def health_payload() -> dict:
    """Health report as a well-behaved model would return it."""
    return {
        "recommendation": "moderate_caution",
        "summary": "High added sugar for a diabetic user.",
        "pros": ["Whole-grain oats"],
        "cons": ["12 g sugar per bar"],
        "overallRecommendation": "moderate_caution",
        "safetyScore": 45,
        "keyWarnings": ["Monitor blood glucose"],
        "confidence": 80,
    }


@pytest.fixture
def food_text(food_payload: dict) -> str:
    """Food payload wrapped in prose, as models tend to answer."""
    return f"Here is the analysis:\n```json\n{json.dumps(food_payload)}\n```"


@pytest.fixture
def health_text(health_payload: dict) -> str:
    return json.dumps(health_payload)


@pytest.fixture
def sample_conditions() -> list[HealthCondition]:
    return [
        HealthCondition(id="c1", name="Type 2 Diabetes", severity="moderate",
                        type="chronic_disease"),
        HealthCondition(id="a1", name="Peanut Allergy", severity="severe", type="allergy"),
    ]


# === FIXTURES: Mock LLM ===


@pytest.fixture
def mock_llm() -> AsyncMock:
    """Mock BaseLLMClient; tests set generate.return_value / side_effect."""
    client = AsyncMock()
    client.generate = AsyncMock(return_value="{}")
    client.supports_vision = True
    client.provider_name = "mock"
    client.model_name = "mock-vision-1"
    return client


@pytest.fixture
def no_sleep() -> AsyncMock:
    """Drop-in for asyncio.sleep that records backoff delays."""
    return AsyncMock(return_value=None)


# === FIXTURES: Temp dirs and settings ===


@pytest.fixture
def tmp_cache_dir(tmp_path: Path) -> Path:
    """Temporary cache directory."""
    cache = tmp_path / "cache"
    cache.mkdir()
    return cache


@pytest.fixture
def tmp_profile_dir(tmp_path: Path) -> Path:
    profiles = tmp_path / "profiles"
    profiles.mkdir()
    return profiles


@pytest.fixture
def settings(tmp_cache_dir: Path, tmp_profile_dir: Path) -> Settings:
    """Settings isolated from any .env, with short timeouts."""
    return Settings(
        _env_file=None,
        cache_root=tmp_cache_dir,
        profile_root=tmp_profile_dir,
        food_timeout_s=2.0,
        health_timeout_s=2.0,
    )


# === FIXTURES: Uploads ===


@pytest.fixture
def make_upload(tmp_path: Path) -> Callable[..., UploadedFile]:
    """Factory writing a temporary upload file and describing it."""
    counter = {"n": 0}

    def _make(
        data: bytes = PNG_BYTES,
        name: str = "label.png",
        mime_type: str = "image/png",
        size: int | None = None,
    ) -> UploadedFile:
        counter["n"] += 1
        path = tmp_path / "uploads" / f"upload-{counter['n']}.tmp"
        path.parent.mkdir(exist_ok=True)
        path.write_bytes(data)
        return UploadedFile(
            path=path,
            original_name=name,
            mime_type=mime_type,
            size=len(data) if size is None else size,
        )

    return _make


@pytest.fixture
def write_profile(tmp_profile_dir: Path) -> Callable[[str, dict], Path]:
    """Store a profile document for a user id."""

    def _write(user_id: str, profile: dict) -> Path:
        path = tmp_profile_dir / f"{user_id}.json"
        path.write_text(json.dumps(profile), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES
