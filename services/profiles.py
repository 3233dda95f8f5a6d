# services/profiles.py
from __future__ import annotations

import logging
from typing import Any, Dict

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import NotFoundError
from services.db import Profile

_LOG = logging.getLogger(__name__)


class ProfileService:
    """Dietary context of one user: allergies, free-text preferences, basics."""

    def __init__(self, db: AsyncSession, user_id: str, log: logging.Logger = _LOG) -> None:
        self.db = db
        self.user_id = user_id
        self.log = log

    async def find_profile(self) -> Profile | None:
        return (
            await self.db.execute(select(Profile).where(Profile.user_id == self.user_id))
        ).scalar_one_or_none()

    async def get_profile(self) -> Profile:
        profile = await self.find_profile()
        if profile is None:
            raise NotFoundError("PROFILE_NOT_FOUND", "Profile not found")
        return profile

    async def upsert_profile(self, payload: Dict[str, Any]) -> Profile:
        # Try update → if row doesn’t exist we’ll insert.
        res = await self.db.execute(
            update(Profile)
            .where(Profile.user_id == self.user_id)
            .values(**payload)
            .returning(Profile)
        )
        profile = res.scalar_one_or_none()

        if profile is None:
            profile = Profile(user_id=self.user_id, **payload)
            self.db.add(profile)
            self.log.info("profile created for user %s", self.user_id)

        await self.db.commit()
        await self.db.refresh(profile)
        return profile
