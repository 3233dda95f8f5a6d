"""
services/diets.py
────────────────────────────────────────────────────────────────────────
Diet CRUD and the forward-only status lifecycle

    draft → meals_ready → ready → archived

Every query is filtered by the owning user; somebody else's diet is
reported exactly like a missing one.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import ConflictError, NotFoundError
from core.lifecycle import can_transition_diet
from core.models.commands import DietCreate
from core.models.enums import DietStatus
from services.db import Diet, Generation

_LOG = logging.getLogger(__name__)

MAX_PER_PAGE = 50


def end_date_for(created_at: datetime, number_of_days: int) -> datetime:
    return created_at + timedelta(days=number_of_days)


class DietService:
    def __init__(self, db: AsyncSession, user_id: str, log: logging.Logger = _LOG) -> None:
        self.db = db
        self.user_id = user_id
        self.log = log

    # ───────────────────────── create ──────────────────────────
    async def create_diet(self, body: DietCreate) -> Diet:
        generation = (
            await self.db.execute(
                select(Generation.id).where(
                    Generation.id == body.generation_id,
                    Generation.user_id == self.user_id,
                )
            )
        ).scalar_one_or_none()
        if generation is None:
            raise NotFoundError("GENERATION_NOT_FOUND", f"Generation {body.generation_id} not found")

        if await self.find_by_generation(body.generation_id) is not None:
            raise ConflictError(
                "DIET_ALREADY_EXISTS", f"A diet for generation {body.generation_id} already exists"
            )

        now = datetime.now(timezone.utc)
        diet = Diet(
            user_id=self.user_id,
            number_of_days=body.number_of_days,
            calories_per_day=body.calories_per_day,
            preferred_cuisines=[c.value for c in body.preferred_cuisines],
            generation_id=body.generation_id,
            status=DietStatus.draft,
            created_at=now,
            end_date=end_date_for(now, body.number_of_days),
        )
        self.db.add(diet)
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise ConflictError(
                "DIET_ALREADY_EXISTS", f"A diet for generation {body.generation_id} already exists"
            ) from exc

        self.log.info("diet %s created (draft) for generation %s", diet.id, body.generation_id)
        return diet

    # ───────────────────────── read ────────────────────────────
    async def get_diet(self, diet_id: int) -> Diet:
        """Fetch by id – archived diets included."""
        diet = (
            await self.db.execute(
                select(Diet).where(Diet.id == diet_id, Diet.user_id == self.user_id)
            )
        ).scalar_one_or_none()
        if diet is None:
            raise NotFoundError("DIET_NOT_FOUND", f"Diet {diet_id} not found")
        return diet

    async def find_by_generation(self, generation_id: int) -> Diet | None:
        return (
            await self.db.execute(
                select(Diet).where(
                    Diet.generation_id == generation_id,
                    Diet.user_id == self.user_id,
                )
            )
        ).scalar_one_or_none()

    async def list_diets(self, page: int = 1, per_page: int = 10) -> Tuple[List[Diet], int]:
        """One page of non-archived diets, newest first, plus their total count."""
        visible = (Diet.user_id == self.user_id, Diet.status != DietStatus.archived)

        total = (
            await self.db.execute(select(func.count()).select_from(Diet).where(*visible))
        ).scalar_one()

        rows = (
            await self.db.execute(
                select(Diet)
                .where(*visible)
                .order_by(Diet.created_at.desc(), Diet.id.desc())
                .offset((page - 1) * per_page)
                .limit(per_page)
            )
        ).scalars().all()
        return list(rows), total

    # ───────────────────────── lifecycle ───────────────────────
    def advance(self, diet: Diet, target: DietStatus) -> None:
        """Move `diet` forward to `target` in the session; caller commits."""
        if not can_transition_diet(diet.status, target):
            raise ConflictError(
                "INVALID_STATUS_TRANSITION",
                f"Diet {diet.id} cannot move from {diet.status.value} to {target.value}",
            )
        self.log.info("diet %s: %s → %s", diet.id, diet.status.value, target.value)
        diet.status = target

    async def advance_status(self, diet: Diet, target: DietStatus) -> Diet:
        self.advance(diet, target)
        await self.db.commit()
        return diet

    async def archive_diet(self, diet_id: int) -> Diet:
        diet = await self.get_diet(diet_id)
        if diet.status == DietStatus.archived:
            raise ConflictError("DIET_ALREADY_ARCHIVED", f"Diet {diet_id} is already archived")
        return await self.advance_status(diet, DietStatus.archived)
