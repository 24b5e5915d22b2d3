# src/schemas/health.py — v1
"""Health-suitability report produced by the second stage."""

from __future__ import annotations

from typing import Any

from nutriguard.schemas.merger import Bound, SchemaSpec

HEALTH_SCHEMA_VERSION = "2.0"

RECOMMENDATIONS = (
    "highly_recommended",
    "recommended",
    "moderate_caution",
    "not_recommended",
    "strongly_avoid",
)

NO_HEALTH_DATA_MESSAGE = (
    "No health conditions found for analysis. Food analysis provided "
    "without health-specific recommendations."
)


def default_health_report() -> dict[str, Any]:
    return {
        "recommendation": None,
        "summary": None,
        "recommendationDetail": None,
        "pros": [],
        "cons": [],
        "ingredients": [],
        "nutrients": {},
        "alternatives": [],
        "overallRecommendation": None,
        "safetyScore": 0,
        "suitabilityAnalysis": {
            "beneficial": [],
            "concerns": [],
        },
        "portionGuidance": {
            "recommendedServing": None,
            "frequency": None,
            "reasoning": None,
        },
        "alternativeSuggestions": [],
        "keyWarnings": [],
        "medicalDisclaimer": None,
        "confidence": 0,
    }


def no_health_data_result() -> dict[str, Any]:
    """Fixed answer for a user without any stored health conditions."""
    return {
        "recommendation": "no_health_data",
        "message": NO_HEALTH_DATA_MESSAGE,
        "safetyScore": 75,
        "overallRecommendation": "moderate_caution",
    }


HEALTH_SCHEMA = SchemaSpec(
    name="health_report",
    version=HEALTH_SCHEMA_VERSION,
    defaults=default_health_report,
    array_fields=frozenset({
        "pros",
        "cons",
        "ingredients",
        "alternatives",
        "suitabilityAnalysis.beneficial",
        "suitabilityAnalysis.concerns",
        "alternativeSuggestions",
        "keyWarnings",
    }),
    bounded_fields={
        "safetyScore": Bound(0, 100, floor=0),
        "confidence": Bound(0, 100, floor=0),
    },
    required_fields=("recommendation", "safetyScore"),
)
