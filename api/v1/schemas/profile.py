from __future__ import annotations
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class ProfileIn(BaseModel):
    age: int | None = Field(None, ge=0, le=130)
    gender: str | None = None
    weight: float | None = Field(None, gt=0)
    allergies: List[str] = []
    dietary_preferences: str | None = None
    terms_accepted: bool = False


class ProfileOut(ProfileIn):
    user_id: str

    model_config = ConfigDict(from_attributes=True)
