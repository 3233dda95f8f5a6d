from __future__ import annotations
from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, field_validator

from core.guards import shopping_list_problem


class ShoppingListIn(BaseModel):
    items: List[str]

    @field_validator("items")
    @classmethod
    def _limits(cls, items: List[str]) -> List[str]:
        problem = shopping_list_problem(items)
        if problem:
            raise ValueError(problem)
        return items


class ShoppingListCreated(BaseModel):
    shopping_list_id: int


class ShoppingListOut(BaseModel):
    id: int
    diet_id: int
    items: List[str]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
