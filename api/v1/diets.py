# api/v1/diets.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.models.commands import DietCreate
from services.auth import current_user_id
from services.db import get_session
from services.diets import MAX_PER_PAGE, DietService
from services.meals import MealService
from api.v1.schemas import DietCreated, DietDetail, DietOut, DietPage

router = APIRouter()


# ───────────────────────── create ──────────────────────────
@router.post("", response_model=DietCreated, status_code=status.HTTP_201_CREATED)
async def create_diet(
    body: DietCreate,
    user_id: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> DietCreated:
    diet = await DietService(db, user_id).create_diet(body)
    return DietCreated.model_validate(diet, from_attributes=True)


# ───────────────────────── list ────────────────────────────
@router.get("", response_model=DietPage, summary="Non-archived diets, newest first")
async def list_diets(
    page: int = Query(1, ge=1),
    per_page: int = Query(10, ge=1, le=MAX_PER_PAGE),
    user_id: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> DietPage:
    rows, total = await DietService(db, user_id).list_diets(page, per_page)
    return DietPage(
        data=[DietOut.model_validate(d, from_attributes=True) for d in rows],
        page=page,
        per_page=per_page,
        total=total,
    )


# ───────────────────────── fetch one ────────────────────────
@router.get("/{diet_id}", response_model=DietDetail)
async def get_diet(
    diet_id: int,
    user_id: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> DietDetail:
    diet = await DietService(db, user_id).get_diet(diet_id)
    meals = await MealService(db, user_id).list_meals(diet_id)
    return DietDetail.from_rows(diet, meals)


# ───────────────────────── archive ─────────────────────────
@router.delete("/{diet_id}", response_model=DietOut, summary="Archive a diet")
async def archive_diet(
    diet_id: int,
    user_id: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> DietOut:
    diet = await DietService(db, user_id).archive_diet(diet_id)
    return DietOut.model_validate(diet, from_attributes=True)
