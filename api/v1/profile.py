from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from services.auth import current_user_id
from services.db import get_session
from services.profiles import ProfileService
from api.v1.schemas import ProfileIn, ProfileOut

router = APIRouter()


# ───────────────────────── read ─────────────────────────────
@router.get("", response_model=ProfileOut, status_code=status.HTTP_200_OK)
async def get_profile(
    user_id: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> ProfileOut:
    profile = await ProfileService(db, user_id).get_profile()
    return ProfileOut.model_validate(profile, from_attributes=True)


# ───────────────────────── upsert ───────────────────────────
@router.put("", response_model=ProfileOut, status_code=status.HTTP_200_OK)
async def upsert_profile(
    body: ProfileIn,
    user_id: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> ProfileOut:
    profile = await ProfileService(db, user_id).upsert_profile(body.model_dump())
    return ProfileOut.model_validate(profile, from_attributes=True)
