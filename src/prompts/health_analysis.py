# src/prompts/health_analysis.py — v1
"""Prompt for judging a product against a user's health conditions."""

from __future__ import annotations

import json
from typing import Any, Iterable, Mapping

from nutriguard.core.models import HealthCondition
from nutriguard.schemas.health import RECOMMENDATIONS

SYSTEM_PROMPT = (
    "You are a registered dietitian and clinical nutrition consultant. "
    "Be conservative with recommendations for serious conditions. "
    "Return only valid JSON, with no additional text."
)

# (response key, food-data path, unit)
NUTRIENT_ROWS: tuple[tuple[str, tuple[str, ...], str], ...] = (
    ("calories", ("calories",), "kcal"),
    ("total_fat", ("macros", "totalFat"), "g"),
    ("saturated_fat", ("macros", "saturatedFat"), "g"),
    ("sodium", ("micronutrients", "sodium"), "mg"),
    ("total_carbohydrates", ("macros", "totalCarbs"), "g"),
    ("dietary_fiber", ("macros", "dietaryFiber"), "g"),
    ("sugars", ("macros", "totalSugars"), "g"),
    ("protein", ("macros", "protein"), "g"),
)

_INSTRUCTIONS = """ANALYSIS REQUIREMENTS:
1. Overall recommendation with a safety score
2. Ingredient-by-ingredient analysis with health impacts
3. Nutrient analysis with condition-specific impacts and daily value percentages
4. Portion guidance and consumption frequency
5. At least three alternative product suggestions
6. Specific warnings per condition, including drug-nutrient interactions for medications
7. Always recommend consulting a healthcare provider"""


def format_conditions(conditions: Iterable[HealthCondition]) -> str:
    """One bullet line per condition."""
    return "\n".join(
        f"- {c.name}: {c.description or 'No description'} "
        f"(Severity: {c.severity or 'Not specified'}, Type: {c.type})"
        for c in conditions
    )


def build_health_prompt(
    food_data: Mapping[str, Any],
    conditions: list[HealthCondition],
) -> str:
    """Render the full analysis prompt for one product and condition set."""
    impact_keys = [c.slug for c in conditions[:2]] or ["general"]
    health_impact = {key: "Specific impact on this condition" for key in impact_keys}
    nutrition = food_data.get("nutrition") or {}

    nutrients = {}
    for key, path, unit in NUTRIENT_ROWS:
        nutrients[key] = {
            "amount": _lookup(nutrition, path) or 0,
            "unit": unit,
            "dailyValue": "percentage of daily value",
            "impact": "good|neutral|bad",
            "summary": "Analysis of this nutrient for the user",
            "benefits": ["Benefit if any"],
            "concerns": ["Concern if any"],
            "safeConsumption": {
                "recommendation": "Intake recommendation",
                "dailyRecommendedIntake": "Daily recommendation for the user's profile",
                "percentOfDaily": "percentage",
            },
            "healthImpact": health_impact,
        }

    template = {
        "name": food_data.get("productName") or "Unknown Product",
        "brand": food_data.get("brand") or "Unknown Brand",
        "recommendation": "|".join(RECOMMENDATIONS),
        "summary": "One-sentence summary of the recommendation",
        "recommendationDetail": "Why this recommendation was made, naming nutrients, ingredients and conditions",
        "pros": ["Benefit with amounts and why it helps the user's conditions"],
        "cons": ["Concern with amounts and how it relates to daily limits"],
        "ingredients": [{
            "name": "Ingredient Name",
            "impact": "good|neutral|bad",
            "description": "What this ingredient is",
            "summary": "Role and health implications",
            "benefits": ["Specific benefit"],
            "concerns": ["Specific concern"],
            "safeConsumption": {
                "recommendation": "Recommendation given the user's conditions",
                "limits": "Daily or weekly limits if applicable",
                "alternatives": "Healthier alternatives",
            },
            "healthImpact": health_impact,
        }],
        "nutrients": nutrients,
        "alternatives": [{
            "id": "alternative-id",
            "name": "Alternative Product Name",
            "brand": "Brand Name",
            "benefits": ["Specific benefit"],
        }],
        "overallRecommendation": "|".join(RECOMMENDATIONS),
        "safetyScore": "number between 0-100",
        "suitabilityAnalysis": {
            "beneficial": [{
                "aspect": "Beneficial aspect",
                "reason": "Explanation",
                "healthBenefit": "Specific health benefit",
                "relatedConditions": ["condition names"],
            }],
            "concerns": [{
                "aspect": "Concerning aspect",
                "severity": "low|moderate|high|critical",
                "reason": "Explanation",
                "healthRisk": "Specific health risk",
                "relatedConditions": ["condition names"],
                "mitigation": "How to reduce risk",
            }],
        },
        "portionGuidance": {
            "recommendedServing": "Serving size recommendation",
            "frequency": "daily|weekly|occasionally|rarely|never",
            "reasoning": "Reasoning for the portion guidance",
        },
        "alternativeSuggestions": [{"suggestion": "Alternative", "reason": "Why it is better"}],
        "keyWarnings": ["Critical warning"],
        "medicalDisclaimer": "Standard disclaimer about consulting healthcare providers",
        "confidence": "number between 0-100",
    }

    return (
        "Provide a detailed health analysis of this food product for a user "
        "with the following health conditions.\n\n"
        f"USER'S HEALTH CONDITIONS:\n{format_conditions(conditions)}\n\n"
        f"FOOD PRODUCT DATA:\n{json.dumps(food_data, indent=2, ensure_ascii=False)}\n\n"
        f"{_INSTRUCTIONS}\n\n"
        "REQUIRED JSON RESPONSE FORMAT (exactly this structure):\n"
        f"{json.dumps(template, indent=2, ensure_ascii=False)}"
    )


def _lookup(data: Mapping[str, Any], path: tuple[str, ...]) -> Any:
    node: Any = data
    for key in path:
        if not isinstance(node, Mapping):
            return None
        node = node.get(key)
    return node
