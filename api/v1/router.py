# api/v1/router.py
from fastapi import APIRouter

from . import diets, generations, meals, profile, shopping_lists

api_router = APIRouter()

api_router.include_router(generations.router, prefix="/generations", tags=["Generations"])
api_router.include_router(diets.router, prefix="/diets", tags=["Diets"])

# meals and the shopping list live *under* the diet resource
api_router.include_router(meals.router, prefix="/diets", tags=["Meals"])
api_router.include_router(shopping_lists.router, prefix="/diets", tags=["Shopping lists"])

api_router.include_router(profile.router, prefix="/profile", tags=["Profile"])
