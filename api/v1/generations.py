# api/v1/generations.py
from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from core.models.commands import GenerationParams
from services.auth import current_user_id
from services.db import Generation, get_session
from services.generations import (
    GenerationService,
    error_of,
    params_of,
    preview_of,
    run_generation,
)
from services.openrouter import OpenRouterClient, get_model_client
from services.promotion import DietPromoter
from api.v1.schemas import DietDetail, GenerationCreated, GenerationOut

router = APIRouter()


def _serialize(gen: Generation) -> GenerationOut:
    return GenerationOut(
        id=gen.id,
        status=gen.status,
        created_at=gen.created_at,
        source_text=params_of(gen),
        preview=preview_of(gen),
        error=error_of(gen),
    )


# ───────────────────────── create ──────────────────────────
@router.post(
    "",
    response_model=GenerationCreated,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Ask the model for a meal plan",
)
async def create_generation(
    body: GenerationParams,
    background: BackgroundTasks,
    user_id: str = Depends(current_user_id),
    client: OpenRouterClient = Depends(get_model_client),
    db: AsyncSession = Depends(get_session),
) -> GenerationCreated:
    svc = GenerationService(db, user_id)
    gen = await svc.create_generation(body)

    if settings.generation_mode == "background":
        background.add_task(run_generation, gen.id, user_id, client)
    else:
        gen = await svc.complete_generation(gen.id, client)

    return GenerationCreated(generation_id=gen.id, status=gen.status, error=error_of(gen))


# ───────────────────────── poll ────────────────────────────
@router.get("/{generation_id}", response_model=GenerationOut)
async def get_generation(
    generation_id: int,
    user_id: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> GenerationOut:
    gen = await GenerationService(db, user_id).get_generation(generation_id)
    return _serialize(gen)


# ───────────────────────── approve ─────────────────────────
@router.post(
    "/{generation_id}/approve",
    response_model=DietDetail,
    summary="Turn a completed preview into diet + meals + shopping list",
)
async def approve_generation(
    generation_id: int,
    user_id: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> DietDetail:
    promoter = DietPromoter(db, user_id)
    diet = await promoter.approve(generation_id)
    meals = await promoter.meals.list_meals(diet.id)
    return DietDetail.from_rows(diet, meals)
