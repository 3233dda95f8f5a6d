# services/shopping_lists.py
from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import ConflictError, NotFoundError, ValidationError
from core.guards import shopping_list_problem
from core.models.enums import DietStatus
from services.db import ShoppingList
from services.diets import DietService
from services.meals import MealService

_LOG = logging.getLogger(__name__)


class ShoppingListService:
    def __init__(self, db: AsyncSession, user_id: str, log: logging.Logger = _LOG) -> None:
        self.db = db
        self.user_id = user_id
        self.log = log
        self.diets = DietService(db, user_id, log)
        self.meals = MealService(db, user_id, log)

    async def find_for_diet(self, diet_id: int) -> ShoppingList | None:
        return (
            await self.db.execute(select(ShoppingList).where(ShoppingList.diet_id == diet_id))
        ).scalar_one_or_none()

    async def get_shopping_list(self, diet_id: int) -> ShoppingList:
        await self.diets.get_diet(diet_id)
        shopping_list = await self.find_for_diet(diet_id)
        if shopping_list is None:
            raise NotFoundError("SHOPPING_LIST_NOT_FOUND", f"Diet {diet_id} has no shopping list")
        return shopping_list

    async def create_shopping_list(self, diet_id: int, items: Sequence[str]) -> ShoppingList:
        self.log.info("creating shopping list for diet %s", diet_id)

        problem = shopping_list_problem(items)
        if problem:
            raise ValidationError("INVALID_INPUT", problem)

        diet = await self.diets.get_diet(diet_id)
        if diet.status == DietStatus.archived:
            raise ConflictError("DIET_ARCHIVED", f"Diet {diet_id} is archived")
        if await self.find_for_diet(diet_id) is not None:
            raise ConflictError(
                "SHOPPING_LIST_ALREADY_EXISTS", "Shopping list for this diet already exists"
            )

        has_meals = await self.meals.count_meals(diet_id) > 0
        shopping_list = ShoppingList(diet_id=diet_id, items=list(items))
        self.db.add(shopping_list)

        # a list on top of existing meals completes the diet
        if has_meals and diet.status != DietStatus.ready:
            self.diets.advance(diet, DietStatus.ready)

        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise ConflictError(
                "SHOPPING_LIST_ALREADY_EXISTS", "Shopping list for this diet already exists"
            ) from exc

        self.log.info("shopping list %s created for diet %s", shopping_list.id, diet_id)
        return shopping_list
