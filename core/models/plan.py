"""
core/models/plan.py
────────────────────────────────────────────────────────────────────────
Typed view of the plan the model returns inside
`choices[0].message.content`:

    {
      "diet_plan":     [{"day": 0, "meals": [{meal_number_in_day, name,
                         calories, meal_type, ingredients[]}, ...]}, ...],
      "shopping_list": [{"name": ..., "quantity": ...}, ...]
    }

Day and meal numbering is 0-based by contract.
"""
from __future__ import annotations

import json
import re
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, ValidationError

from .enums import MealType


class PlanParseError(ValueError):
    """Model output does not honour the diet_plan / shopping_list contract."""


class Ingredient(BaseModel):
    name: str
    quantity: str


class PlannedMeal(BaseModel):
    meal_number_in_day: int = 0
    name: str
    calories: int | float
    meal_type: MealType
    ingredients: List[Ingredient] = []


class DayPlan(BaseModel):
    day: int
    meals: List[PlannedMeal] = []


class DietPlan(BaseModel):
    diet_plan: List[DayPlan]
    shopping_list: List[Ingredient]

    model_config = ConfigDict(extra="ignore")


_FENCED = re.compile(r"```(?:json)?\s*({[\s\S]*?})\s*```")


def extract_json(raw: str | dict) -> Dict[str, Any]:
    """Decode `raw`, tolerating a Markdown ```json fence around the object."""
    if isinstance(raw, dict):
        return raw
    text = raw.strip()
    match = _FENCED.search(text)
    if match:
        text = match.group(1)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise PlanParseError(f"model content is not JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise PlanParseError("model content is not a JSON object")
    return data


def plan_from_completion(response: Dict[str, Any]) -> DietPlan:
    """Pull the plan out of a raw chat-completions response."""
    try:
        content = response["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise PlanParseError("completion has no message content") from exc
    if not content:
        raise PlanParseError("completion content is empty")

    try:
        return DietPlan.model_validate(extract_json(content))
    except ValidationError as exc:
        raise PlanParseError(f"plan does not match contract: {exc}") from exc
