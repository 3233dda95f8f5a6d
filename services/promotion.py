"""
services/promotion.py
────────────────────────────────────────────────────────────────────────
"Approve" for a completed generation: materialise its preview as
diet + meals + shopping list.

    1. diet for the generation?     no  → create it (draft)
    2. draft?                       meals stored → only advance status
                                    else         → create meals (→ meals_ready)
    3. meals_ready?                 list stored  → only advance status
                                    else         → create list (→ ready)

A preview that fails `plan_problems()` is refused (409) before anything is
inserted.

Each step looks at the current state first, so re-running after a
partial failure or a double click inserts nothing twice.
"""
from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import ConflictError
from core.models.commands import DietCreate
from core.models.enums import DietStatus, GenerationStatus
from core.promotion import flatten_meals, plan_problems, shopping_items
from services.db import Diet
from services.diets import DietService
from services.generations import GenerationService, params_of, preview_of
from services.meals import MealService
from services.shopping_lists import ShoppingListService

_LOG = logging.getLogger(__name__)


class DietPromoter:
    def __init__(self, db: AsyncSession, user_id: str, log: logging.Logger = _LOG) -> None:
        self.log = log
        self.generations = GenerationService(db, user_id, log)
        self.diets = DietService(db, user_id, log)
        self.meals = MealService(db, user_id, log)
        self.shopping_lists = ShoppingListService(db, user_id, log)

    async def approve(self, generation_id: int) -> Diet:
        generation = await self.generations.get_generation(generation_id)
        if generation.status != GenerationStatus.completed:
            raise ConflictError(
                "GENERATION_NOT_COMPLETED",
                f"Generation {generation_id} is {generation.status.value}",
            )
        plan = preview_of(generation)
        params = params_of(generation)

        diet = await self.diets.find_by_generation(generation_id)
        if diet is None or diet.status in (DietStatus.draft, DietStatus.meals_ready):
            # every step is checked before the first insert
            problems = plan_problems(plan, params)
            if problems:
                self.log.warning("generation %s preview cannot be promoted: %s", generation_id, problems)
                raise ConflictError("PREVIEW_NOT_PROMOTABLE", problems)

        if diet is None:
            diet = await self.diets.create_diet(
                DietCreate(
                    number_of_days=params.number_of_days,
                    calories_per_day=params.calories_per_day,
                    preferred_cuisines=params.preferred_cuisines,
                    generation_id=generation_id,
                )
            )

        if diet.status == DietStatus.draft:
            if await self.meals.count_meals(diet.id):
                self.log.warning("diet %s has meals but is still draft – repairing status", diet.id)
                await self.diets.advance_status(diet, DietStatus.meals_ready)
            else:
                await self.meals.create_meals(diet.id, flatten_meals(plan))

        diet = await self.diets.get_diet(diet.id)
        if diet.status == DietStatus.meals_ready:
            if await self.shopping_lists.find_for_diet(diet.id) is not None:
                self.log.warning("diet %s has a shopping list but is not ready – repairing status", diet.id)
                await self.diets.advance_status(diet, DietStatus.ready)
            else:
                await self.shopping_lists.create_shopping_list(diet.id, shopping_items(plan))

        return await self.diets.get_diet(diet.id)
