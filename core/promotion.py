"""
Turn an approved preview into the commands the promoter issues.

Meal days come from the position in `diet_plan`, not from the model's own
`day` field, so an off-by-one or inconsistent numbering in the model output
cannot shift meals around.

`plan_problems()` runs the same guards the promoter will hit, up front, so a
preview that could never be materialised is rejected while the generation is
still pending.
"""
from __future__ import annotations

from typing import List

from core.guards import find_meal_conflicts, shopping_list_problem
from core.models.commands import GenerationParams, MealCreate
from core.models.plan import DietPlan, PlannedMeal


def _instructions(meal: PlannedMeal) -> str:
    lines = [meal.name]
    lines += [f"{ing.name} {ing.quantity}" for ing in meal.ingredients]
    return "\n".join(lines)


def flatten_meals(plan: DietPlan) -> List[MealCreate]:
    return [
        MealCreate(
            day=index,
            meal_type=meal.meal_type,
            approx_calories=round(meal.calories),
            instructions=_instructions(meal),
        )
        for index, day in enumerate(plan.diet_plan)
        for meal in day.meals
    ]


def shopping_items(plan: DietPlan) -> List[str]:
    return [f"{item.name} - {item.quantity}" for item in plan.shopping_list]


def plan_problems(plan: DietPlan, params: GenerationParams) -> List[str]:
    """Reasons `plan` does not fit `params`; empty when it can be promoted."""
    problems: List[str] = []

    if len(plan.diet_plan) != params.number_of_days:
        problems.append(
            f"plan has {len(plan.diet_plan)} day(s), {params.number_of_days} requested"
        )

    for index, day in enumerate(plan.diet_plan):
        if not day.meals:
            problems.append(f"day {index} has no meals")
        elif len(day.meals) > params.meals_per_day:
            problems.append(
                f"day {index} has {len(day.meals)} meals, at most {params.meals_per_day} requested"
            )

    for c in find_meal_conflicts(flatten_meals(plan)):
        problems.append(f"day {c.day} repeats {c.meal_type}")

    listed = shopping_list_problem(shopping_items(plan))
    if listed:
        problems.append(listed)
    return problems
