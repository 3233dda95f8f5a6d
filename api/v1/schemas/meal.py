from __future__ import annotations
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from core.models.commands import MealCreate
from core.models.enums import MealType


class MealsIn(BaseModel):
    meals: List[MealCreate] = Field(..., min_length=1)


class MealsCreated(BaseModel):
    meal_ids: List[int]


class MealOut(BaseModel):
    id: int
    diet_id: int
    day: int
    meal_type: MealType
    instructions: str | None = None
    approx_calories: int | None = None

    model_config = ConfigDict(from_attributes=True)
