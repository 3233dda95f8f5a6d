"""
core/guards.py
────────────────────────────────────────────────────────────────────────
Pure checks that gate meal and shopping-list creation.

* `invalid_days()`          – meal days outside [0, number_of_days - 1]
* `find_meal_conflicts()`   – repeated (day, meal_type) slots, inside the
                              incoming batch or against stored meals
* `shopping_list_problem()` – item count / item length limits

Every offender is reported, never just the first one.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from core.models.enums import MealType

MAX_SHOPPING_ITEMS = 100
MAX_ITEM_LENGTH = 200

SlotKey = Tuple[int, str]


@dataclass(frozen=True)
class MealConflict:
    day: int
    meal_type: str
    entries: Tuple[int, ...] = field(default_factory=tuple)  # positions in the batch
    existing: bool = False                                   # clashes with a stored meal

    def as_dict(self) -> Dict[str, Any]:
        return {
            "day": self.day,
            "meal_type": self.meal_type,
            "entries": list(self.entries),
            "existing": self.existing,
        }


def _slot(day: int, meal_type: MealType | str) -> SlotKey:
    return day, MealType(meal_type).value


def invalid_days(meals: Iterable[Any], number_of_days: int) -> List[int]:
    """Sorted, de-duplicated days that do not fit a diet of `number_of_days`."""
    last = number_of_days - 1
    return sorted({m.day for m in meals if m.day < 0 or m.day > last})


def find_meal_conflicts(
    incoming: Sequence[Any],
    existing: Iterable[Tuple[int, MealType | str]] = (),
) -> List[MealConflict]:
    positions: Dict[SlotKey, List[int]] = {}
    for idx, meal in enumerate(incoming):
        positions.setdefault(_slot(meal.day, meal.meal_type), []).append(idx)

    stored = {_slot(day, mt) for day, mt in existing}

    conflicts: List[MealConflict] = []
    for (day, meal_type), idxs in positions.items():
        clash = (day, meal_type) in stored
        if len(idxs) > 1 or clash:
            conflicts.append(MealConflict(day, meal_type, tuple(idxs), clash))
    return conflicts


def shopping_list_problem(items: Sequence[str] | None) -> str | None:
    """Human-readable reason `items` is unacceptable, or None."""
    if not items:
        return "Shopping list must contain at least one item"
    if len(items) > MAX_SHOPPING_ITEMS:
        return f"Shopping list cannot contain more than {MAX_SHOPPING_ITEMS} items"
    bad = [i for i, item in enumerate(items) if not 1 <= len(item) <= MAX_ITEM_LENGTH]
    if bad:
        return (
            f"Shopping list items must be 1-{MAX_ITEM_LENGTH} characters long "
            f"(offending positions: {', '.join(map(str, bad))})"
        )
    return None
