from __future__ import annotations
from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict

from core.models.enums import CuisineType, DietStatus
from .meal import MealOut


class DietCreated(BaseModel):
    id: int
    status: DietStatus
    generation_id: int

    model_config = ConfigDict(from_attributes=True)


class DietOut(DietCreated):
    number_of_days: int
    calories_per_day: int
    preferred_cuisines: List[CuisineType]
    end_date: datetime
    created_at: datetime


class DietDetail(DietOut):
    meals: List[MealOut] = []

    @classmethod
    def from_rows(cls, diet, meals) -> "DietDetail":
        out = cls.model_validate(diet, from_attributes=True)
        out.meals = [MealOut.model_validate(m, from_attributes=True) for m in meals]
        return out


class DietPage(BaseModel):
    data: List[DietOut]
    page: int
    per_page: int
    total: int
