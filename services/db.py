"""
services/db.py
────────────────────────────────────────────────────────────────────────
* Async SQLAlchemy v2 setup
* Models for generations, generation_logs, diets, meals, shopping_lists
  and profiles
* Session helpers used by routers / background tasks
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import AsyncGenerator, List

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.ext.asyncio import (
    AsyncAttrs,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

from config import settings
from core.models.enums import CuisineType, DietStatus, GenerationStatus, MealType

# ───────── connection helper ────────────────────────────────────────
_ENGINE: AsyncEngine | None = None
_SESSIONS: async_sessionmaker[AsyncSession] | None = None


async def _create_engine() -> AsyncEngine:
    if not settings.database_url:
        raise RuntimeError("Set the DATABASE_URL env var (postgresql+asyncpg://…)")
    return create_async_engine(settings.database_url, pool_pre_ping=True)


async def engine() -> AsyncEngine:
    global _ENGINE
    if _ENGINE is None:
        _ENGINE = await _create_engine()
    return _ENGINE


async def session_factory() -> async_sessionmaker[AsyncSession]:
    global _SESSIONS
    if _SESSIONS is None:
        _SESSIONS = async_sessionmaker(await engine(), expire_on_commit=False)
    return _SESSIONS


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _enum(cls: type, name: str) -> Enum:
    # store the enum *values* ("second breakfast"), not the member names
    return Enum(cls, name=name, values_callable=lambda e: [m.value for m in e])


# ───────── declarative base ──────────────────────────────────────────
Base = declarative_base(cls=AsyncAttrs)


class Generation(Base):
    __tablename__ = "generations"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(String, index=True)
    source_text: Mapped[str] = mapped_column(Text)          # JSON of GenerationParams
    status: Mapped[GenerationStatus] = mapped_column(
        _enum(GenerationStatus, "generation_status"), default=GenerationStatus.pending
    )
    # raw completion when completed, {"error": "..."} when failed
    meta: Mapped[dict | None] = mapped_column("metadata", JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


class GenerationLog(Base):
    __tablename__ = "generation_logs"

    id: Mapped[int] = mapped_column(primary_key=True)
    generation_id: Mapped[int] = mapped_column(ForeignKey("generations.id"), index=True)
    event_type: Mapped[str] = mapped_column(String)          # request / response / error
    message: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


class Diet(Base):
    __tablename__ = "diets"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(String, index=True)
    number_of_days: Mapped[int] = mapped_column(Integer)
    calories_per_day: Mapped[int] = mapped_column(Integer)
    preferred_cuisines: Mapped[List[CuisineType]] = mapped_column(JSON, default=list)
    status: Mapped[DietStatus] = mapped_column(
        _enum(DietStatus, "diet_status"), default=DietStatus.draft
    )
    generation_id: Mapped[int] = mapped_column(ForeignKey("generations.id"), unique=True)
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


class Meal(Base):
    __tablename__ = "meals"
    __table_args__ = (UniqueConstraint("diet_id", "day", "meal_type", name="meals_diet_slot_key"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    diet_id: Mapped[int] = mapped_column(ForeignKey("diets.id"), index=True)
    day: Mapped[int] = mapped_column(Integer)                # 0-based
    meal_type: Mapped[MealType] = mapped_column(_enum(MealType, "meal_type"))
    instructions: Mapped[str | None] = mapped_column(Text)
    approx_calories: Mapped[int | None] = mapped_column(Integer)


class ShoppingList(Base):
    __tablename__ = "shopping_lists"

    id: Mapped[int] = mapped_column(primary_key=True)
    diet_id: Mapped[int] = mapped_column(ForeignKey("diets.id"), unique=True)
    items: Mapped[List[str]] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


class Profile(Base):
    __tablename__ = "profiles"

    user_id: Mapped[str] = mapped_column(String, primary_key=True)
    age: Mapped[int | None] = mapped_column(Integer)
    gender: Mapped[str | None] = mapped_column(String)
    weight: Mapped[float | None] = mapped_column(Float)
    allergies: Mapped[List[str]] = mapped_column(JSON, default=list)
    dietary_preferences: Mapped[str | None] = mapped_column(Text)
    terms_accepted: Mapped[bool] = mapped_column(Boolean, default=False)


# ───────── schema / session helpers ─────────────────────────────────

async def init_db() -> None:
    eng = await engine()
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    make_session = await session_factory()
    async with make_session() as session:
        yield session


async def dispose_engine() -> None:
    global _ENGINE, _SESSIONS
    if _ENGINE is not None:
        await _ENGINE.dispose()
    _ENGINE, _SESSIONS = None, None
