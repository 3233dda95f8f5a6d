from __future__ import annotations
from datetime import datetime

from pydantic import BaseModel

from core.models.commands import GenerationParams
from core.models.enums import GenerationStatus
from core.models.plan import DietPlan


class GenerationCreated(BaseModel):
    generation_id: int
    status: GenerationStatus
    error: str | None = None


class GenerationOut(BaseModel):
    id: int
    status: GenerationStatus
    created_at: datetime
    source_text: GenerationParams
    preview: DietPlan | None = None
    error: str | None = None
