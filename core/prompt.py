"""
core/prompt.py
────────────────────────────────────────────────────────────────────────
Everything we send to the chat model except the transport:

* `SYSTEM_MESSAGE`   – role + output contract
* `build_prompt()`   – deterministic user message for one request
* `RESPONSE_FORMAT`  – JSON-schema `response_format` block
"""
from __future__ import annotations

from typing import Any, Dict, Sequence

from core.models.commands import GenerationParams
from core.models.enums import MealType

SYSTEM_MESSAGE = (
    "You are an expert diet planner. Your job is to create personalised meal "
    "plans together with shopping lists. You MUST answer ONLY with JSON: an "
    "object with exactly two keys, 'diet_plan' and 'shopping_list'. Do not add "
    "any text before or after the JSON. The answer must follow the given "
    "schema. Number days (day) and meals (meal_number_in_day) starting from 0."
)


def _value(item: Any) -> str:
    return getattr(item, "value", item)


def build_prompt(
    params: GenerationParams,
    allergies: Sequence[str] | None = None,
    dietary_preferences: str | None = None,
) -> str:
    """User message for one generation; same inputs → same text."""
    message = (
        f"Please generate a {params.number_of_days}-day diet plan of "
        f"{params.calories_per_day} kcal per day with {params.meals_per_day} "
        f"meals per day. Describe every day precisely, e.g. not 'chicken with "
        f"vegetables' but 'chicken with pepper and salt, with carrots' and so "
        f"on. The shopping list must contain the exact quantities needed to "
        f"prepare all meals."
    )

    if params.preferred_cuisines:
        cuisines = ", ".join(_value(c) for c in params.preferred_cuisines)
        message += f" Preferred cuisines: {cuisines}."

    if allergies:
        message += f" Allergies (never use these ingredients): {', '.join(allergies)}."

    if dietary_preferences and dietary_preferences.strip():
        message += f" Dietary preferences: {dietary_preferences.strip()}."

    return message


_INGREDIENT: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "quantity": {"type": "string"},
    },
    "required": ["name", "quantity"],
}

RESPONSE_FORMAT: Dict[str, Any] = {
    "type": "json_schema",
    "json_schema": {
        "name": "generation_response",
        "schema": {
            "type": "object",
            "properties": {
                "diet_plan": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "day": {"type": "number"},
                            "meals": {
                                "type": "array",
                                "items": {
                                    "type": "object",
                                    "properties": {
                                        "meal_number_in_day": {"type": "number"},
                                        "name": {"type": "string"},
                                        "calories": {"type": "number"},
                                        "meal_type": {
                                            "type": "string",
                                            "enum": [m.value for m in MealType],
                                        },
                                        "ingredients": {
                                            "type": "array",
                                            "items": _INGREDIENT,
                                        },
                                    },
                                    "required": [
                                        "meal_number_in_day",
                                        "name",
                                        "calories",
                                        "meal_type",
                                        "ingredients",
                                    ],
                                },
                            },
                        },
                        "required": ["day", "meals"],
                    },
                },
                "shopping_list": {"type": "array", "items": _INGREDIENT},
            },
            "required": ["diet_plan", "shopping_list"],
            "additionalProperties": False,
        },
    },
}
