# api/v1/meals.py
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from services.auth import current_user_id
from services.db import get_session
from services.meals import MealService
from api.v1.schemas import MealOut, MealsCreated, MealsIn

router = APIRouter()


@router.post(
    "/{diet_id}/meals",
    response_model=MealsCreated,
    status_code=status.HTTP_201_CREATED,
    summary="Bulk-add meals to a diet",
)
async def create_meals(
    diet_id: int,
    body: MealsIn,
    user_id: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> MealsCreated:
    ids = await MealService(db, user_id).create_meals(diet_id, body.meals)
    return MealsCreated(meal_ids=ids)


@router.get("/{diet_id}/meals", response_model=list[MealOut])
async def list_meals(
    diet_id: int,
    user_id: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> list[MealOut]:
    meals = await MealService(db, user_id).list_meals(diet_id)
    return [MealOut.model_validate(m, from_attributes=True) for m in meals]
