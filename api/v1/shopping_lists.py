# api/v1/shopping_lists.py
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from services.auth import current_user_id
from services.db import get_session
from services.shopping_lists import ShoppingListService
from api.v1.schemas import ShoppingListCreated, ShoppingListIn, ShoppingListOut

router = APIRouter()


@router.post(
    "/{diet_id}/shopping-list",
    response_model=ShoppingListCreated,
    status_code=status.HTTP_201_CREATED,
)
async def create_shopping_list(
    diet_id: int,
    body: ShoppingListIn,
    user_id: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> ShoppingListCreated:
    shopping_list = await ShoppingListService(db, user_id).create_shopping_list(diet_id, body.items)
    return ShoppingListCreated(shopping_list_id=shopping_list.id)


@router.get("/{diet_id}/shopping-list", response_model=ShoppingListOut)
async def get_shopping_list(
    diet_id: int,
    user_id: str = Depends(current_user_id),
    db: AsyncSession = Depends(get_session),
) -> ShoppingListOut:
    shopping_list = await ShoppingListService(db, user_id).get_shopping_list(diet_id)
    return ShoppingListOut.model_validate(shopping_list, from_attributes=True)
