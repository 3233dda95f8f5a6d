"""
Status lifecycles.

    Diet:        draft → meals_ready → ready → archived
    Generation:  pending → completed | error

Diet status only moves forward along that order; archived (and, for
generations, both completed and error) is terminal.
"""
from __future__ import annotations

from core.models.enums import DietStatus, GenerationStatus

DIET_ORDER = (
    DietStatus.draft,
    DietStatus.meals_ready,
    DietStatus.ready,
    DietStatus.archived,
)

TERMINAL_GENERATION = frozenset({GenerationStatus.completed, GenerationStatus.error})


def can_transition_diet(current: DietStatus | str, target: DietStatus | str) -> bool:
    current, target = DietStatus(current), DietStatus(target)
    if current is DietStatus.archived:
        return False
    return DIET_ORDER.index(target) > DIET_ORDER.index(current)


def can_transition_generation(
    current: GenerationStatus | str, target: GenerationStatus | str
) -> bool:
    current, target = GenerationStatus(current), GenerationStatus(target)
    return current is GenerationStatus.pending and target in TERMINAL_GENERATION
