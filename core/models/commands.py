from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from .enums import CuisineType, MealType

MAX_DAYS = 14
MAX_MEALS_PER_DAY = len(MealType)


class GenerationParams(BaseModel):
    """What the user asks the model for; stored verbatim as `source_text`."""

    number_of_days: int = Field(..., ge=1, le=MAX_DAYS)
    calories_per_day: int = Field(..., gt=0)
    meals_per_day: int = Field(..., ge=1, le=MAX_MEALS_PER_DAY)
    preferred_cuisines: List[CuisineType] = []


class DietCreate(BaseModel):
    number_of_days: int = Field(..., ge=1, le=MAX_DAYS)
    calories_per_day: int = Field(..., gt=0)
    preferred_cuisines: List[CuisineType] = []
    generation_id: int


class MealCreate(BaseModel):
    day: int = Field(..., ge=0)
    meal_type: MealType
    instructions: str | None = None
    approx_calories: int | None = Field(None, ge=0)
