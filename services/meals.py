# services/meals.py
from __future__ import annotations

import logging
from typing import List, Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import ConflictError, ValidationError
from core.guards import find_meal_conflicts, invalid_days
from core.models.commands import MealCreate
from core.models.enums import DietStatus
from services.db import Diet, Meal
from services.diets import DietService

_LOG = logging.getLogger(__name__)


class MealService:
    def __init__(self, db: AsyncSession, user_id: str, log: logging.Logger = _LOG) -> None:
        self.db = db
        self.user_id = user_id
        self.log = log
        self.diets = DietService(db, user_id, log)

    async def list_meals(self, diet_id: int) -> List[Meal]:
        await self.diets.get_diet(diet_id)
        rows = (
            await self.db.execute(
                select(Meal).where(Meal.diet_id == diet_id).order_by(Meal.day, Meal.id)
            )
        ).scalars().all()
        return list(rows)

    async def count_meals(self, diet_id: int) -> int:
        return (
            await self.db.execute(
                select(func.count()).select_from(Meal).where(Meal.diet_id == diet_id)
            )
        ).scalar_one()

    async def create_meals(self, diet_id: int, meals: Sequence[MealCreate]) -> List[int]:
        """Insert the whole batch and move the diet draft → meals_ready, or nothing at all."""
        diet = await self.diets.get_diet(diet_id)
        self._check_batch(diet, meals)

        stored = (
            await self.db.execute(select(Meal.day, Meal.meal_type).where(Meal.diet_id == diet_id))
        ).all()
        conflicts = find_meal_conflicts(meals, [(day, mt) for day, mt in stored])
        if conflicts:
            self.log.warning("diet %s: %d meal slot conflict(s)", diet_id, len(conflicts))
            raise ValidationError("MEAL_CONFLICT", [c.as_dict() for c in conflicts])

        rows = [
            Meal(
                diet_id=diet_id,
                day=m.day,
                meal_type=m.meal_type,
                instructions=m.instructions,
                approx_calories=m.approx_calories,
            )
            for m in meals
        ]
        self.db.add_all(rows)
        if diet.status == DietStatus.draft:
            self.diets.advance(diet, DietStatus.meals_ready)

        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise ConflictError("MEAL_CONFLICT", "A meal slot was taken concurrently") from exc

        self.log.info("diet %s: %d meal(s) added", diet_id, len(rows))
        return [r.id for r in rows]

    def _check_batch(self, diet: Diet, meals: Sequence[MealCreate]) -> None:
        if diet.status == DietStatus.archived:
            raise ConflictError("DIET_ARCHIVED", f"Diet {diet.id} is archived")
        if not meals:
            raise ValidationError("INVALID_INPUT", "At least one meal is required")

        bad_days = invalid_days(meals, diet.number_of_days)
        if bad_days:
            raise ValidationError(
                "INVALID_MEAL_DAY",
                f"Invalid day(s) {', '.join(map(str, bad_days))}: "
                f"diet {diet.id} has days 0-{diet.number_of_days - 1}",
            )
