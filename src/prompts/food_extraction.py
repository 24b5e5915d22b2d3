# src/prompts/food_extraction.py — v1
"""Prompt for reading a packaged-food label photograph."""

from __future__ import annotations

SYSTEM_PROMPT = (
    "You are an expert nutritionist and food analyst. "
    "Return only valid JSON, with no additional text."
)

FOOD_EXTRACTION_PROMPT = """Analyze the food product packaging image and extract information with high precision.

REQUIREMENTS:
- Return ONLY valid JSON, no additional text
- Use null for missing data, never omit a field
- Be conservative with health scores, base them on actual nutritional content
- Identify all forms of sugar (sucrose, fructose, glucose, syrups, etc.)
- Flag artificial additives and preservatives

REQUIRED JSON STRUCTURE:
{
  "productName": "string",
  "brand": "string",
  "category": "string",
  "ingredients": [
    {
      "name": "string",
      "order": number,
      "isAllergen": boolean,
      "isAdditive": boolean,
      "isSugar": boolean,
      "concerns": ["string"]
    }
  ],
  "nutrition": {
    "servingSize": "string",
    "servingsPerContainer": number,
    "calories": number,
    "macros": {
      "protein": number,
      "totalCarbs": number,
      "dietaryFiber": number,
      "totalSugars": number,
      "addedSugars": number,
      "totalFat": number,
      "saturatedFat": number,
      "transFat": number
    },
    "micronutrients": {
      "sodium": number,
      "cholesterol": number,
      "vitamins": [{"name": "string", "amount": "string", "dv": number}],
      "minerals": [{"name": "string", "amount": "string", "dv": number}]
    }
  },
  "allergens": ["string"],
  "dietaryInfo": {
    "isVegan": boolean,
    "isVegetarian": boolean,
    "isGlutenFree": boolean,
    "isKeto": boolean,
    "isDairy": boolean
  },
  "healthMetrics": {
    "healthScore": number between 0 and 100,
    "processingLevel": "unprocessed|minimally processed|processed|ultra-processed",
    "novaGroup": number between 1 and 4,
    "warnings": ["string"],
    "benefits": ["string"]
  },
  "confidence": number between 0 and 100
}"""


def build_food_prompt() -> str:
    """The extraction prompt does not depend on the request; the image carries it."""
    return FOOD_EXTRACTION_PROMPT
