# src/schemas/food.py — v1
"""Food-data payload produced by the extraction stage."""

from __future__ import annotations

from typing import Any

from nutriguard.schemas.merger import Bound, SchemaSpec

FOOD_SCHEMA_VERSION = "1.0"


def default_food_data() -> dict[str, Any]:
    return {
        "productName": None,
        "brand": None,
        "category": None,
        "ingredients": [],
        "nutrition": {
            "servingSize": None,
            "servingsPerContainer": None,
            "calories": None,
            "macros": {
                "protein": None,
                "totalCarbs": None,
                "dietaryFiber": None,
                "totalSugars": None,
                "addedSugars": None,
                "totalFat": None,
                "saturatedFat": None,
                "transFat": None,
            },
            "micronutrients": {
                "sodium": None,
                "cholesterol": None,
                "vitamins": [],
                "minerals": [],
            },
        },
        "allergens": [],
        "dietaryInfo": {
            "isVegan": None,
            "isVegetarian": None,
            "isGlutenFree": None,
            "isKeto": None,
            "isDairy": None,
        },
        "healthMetrics": {
            "healthScore": None,
            "processingLevel": None,
            "novaGroup": None,
            "warnings": [],
            "benefits": [],
        },
        "confidence": 0,
    }


FOOD_SCHEMA = SchemaSpec(
    name="food_data",
    version=FOOD_SCHEMA_VERSION,
    defaults=default_food_data,
    array_fields=frozenset({
        "ingredients",
        "allergens",
        "nutrition.micronutrients.vitamins",
        "nutrition.micronutrients.minerals",
        "healthMetrics.warnings",
        "healthMetrics.benefits",
    }),
    bounded_fields={
        "confidence": Bound(0, 100, floor=0),
        "healthMetrics.healthScore": Bound(0, 100, floor=None),
        "healthMetrics.novaGroup": Bound(1, 4, floor=None),
    },
)
