"""Closed enumerations shared by the DB layer, the API schemas and the prompt."""
from __future__ import annotations

from enum import Enum


class CuisineType(str, Enum):
    polish = "polish"
    italian = "italian"
    indian = "indian"
    asian = "asian"
    vegan = "vegan"
    vegetarian = "vegetarian"
    gluten_free = "gluten-free"
    keto = "keto"
    paleo = "paleo"


class MealType(str, Enum):
    breakfast = "breakfast"
    second_breakfast = "second breakfast"
    lunch = "lunch"
    afternoon_snack = "afternoon snack"
    dinner = "dinner"


class DietStatus(str, Enum):
    draft = "draft"
    meals_ready = "meals_ready"
    ready = "ready"
    archived = "archived"


class GenerationStatus(str, Enum):
    pending = "pending"
    completed = "completed"
    error = "error"
