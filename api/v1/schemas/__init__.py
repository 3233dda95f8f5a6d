"""Re-export individual schema modules for easy imports."""

from .generation import GenerationCreated, GenerationOut
from .diet import DietCreated, DietOut, DietDetail, DietPage
from .meal import MealsIn, MealsCreated, MealOut
from .shopping_list import ShoppingListIn, ShoppingListCreated, ShoppingListOut
from .profile import ProfileIn, ProfileOut

__all__ = [
    "GenerationCreated",
    "GenerationOut",
    "DietCreated",
    "DietOut",
    "DietDetail",
    "DietPage",
    "MealsIn",
    "MealsCreated",
    "MealOut",
    "ShoppingListIn",
    "ShoppingListCreated",
    "ShoppingListOut",
    "ProfileIn",
    "ProfileOut",
]
