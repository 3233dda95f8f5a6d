"""
services/generations.py
────────────────────────────────────────────────────────────────────────
Generation requestor.

    create_generation()   → pending row + "request" log event
    complete_generation() → prompt → model → exactly one terminal
                            transition (completed | error)
    run_generation()      → background-task entry point with its own session

Once the pending row is committed the caller always ends up with a record:
any downstream failure is written onto that same row as its error state.
"""
from __future__ import annotations

import logging
from typing import Any, Dict

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import ConflictError, NotFoundError
from core.lifecycle import can_transition_generation
from core.models.commands import GenerationParams
from core.models.enums import GenerationStatus
from core.models.plan import DietPlan, PlanParseError, plan_from_completion
from core.promotion import plan_problems
from core.prompt import build_prompt
from services.db import Generation, GenerationLog, session_factory
from services.openrouter import ModelRequestError, OpenRouterClient
from services.profiles import ProfileService

_LOG = logging.getLogger(__name__)


def preview_of(generation: Generation) -> DietPlan | None:
    """Parsed plan of a completed generation, else None."""
    if generation.status != GenerationStatus.completed or not generation.meta:
        return None
    return plan_from_completion(generation.meta)


def error_of(generation: Generation) -> str | None:
    if generation.status != GenerationStatus.error or not generation.meta:
        return None
    return generation.meta.get("error")


def params_of(generation: Generation) -> GenerationParams:
    return GenerationParams.model_validate_json(generation.source_text)


class GenerationService:
    def __init__(self, db: AsyncSession, user_id: str, log: logging.Logger = _LOG) -> None:
        self.db = db
        self.user_id = user_id
        self.log = log

    # ───────────────────────── create ──────────────────────────
    async def create_generation(self, params: GenerationParams) -> Generation:
        generation = Generation(
            user_id=self.user_id,
            source_text=params.model_dump_json(),
            status=GenerationStatus.pending,
        )
        self.db.add(generation)
        await self.db.flush()
        self.db.add(
            GenerationLog(
                generation_id=generation.id,
                event_type="request",
                message="Generation record created",
            )
        )
        await self.db.commit()
        self.log.info("generation %s created for user %s", generation.id, self.user_id)
        return generation

    # ───────────────────────── fetch ───────────────────────────
    async def get_generation(self, generation_id: int) -> Generation:
        generation = (
            await self.db.execute(
                select(Generation).where(
                    Generation.id == generation_id,
                    Generation.user_id == self.user_id,
                )
            )
        ).scalar_one_or_none()
        if generation is None:
            raise NotFoundError("GENERATION_NOT_FOUND", f"Generation {generation_id} not found")
        return generation

    # ───────────────────────── complete ────────────────────────
    async def complete_generation(
        self, generation_id: int, client: OpenRouterClient
    ) -> Generation:
        generation = await self.get_generation(generation_id)
        if generation.status != GenerationStatus.pending:
            self.log.info("generation %s already %s", generation_id, generation.status.value)
            return generation

        try:
            prompt = await self._prompt_for(generation)
            response = await client.request_completion(prompt)
            plan = plan_from_completion(response)
            problems = plan_problems(plan, params_of(generation))
            if problems:
                raise PlanParseError("; ".join(problems))
        except (ModelRequestError, PlanParseError) as exc:
            return await self._fail(generation, f"Failed to generate diet plan: {exc}")
        except Exception as exc:
            self.log.exception("generation %s crashed", generation_id)
            return await self._fail(generation, f"Failed to generate diet plan: {exc}")

        self.log.info("generation %s completed", generation_id)
        return await self._finish(
            generation, GenerationStatus.completed, response, "response", "Diet generation completed"
        )

    async def _prompt_for(self, generation: Generation) -> str:
        params = params_of(generation)
        profile = await ProfileService(self.db, self.user_id, self.log).find_profile()
        if profile is None:
            return build_prompt(params)
        return build_prompt(params, profile.allergies, profile.dietary_preferences)

    async def _fail(self, generation: Generation, message: str) -> Generation:
        # an error inside the attempt may have left the transaction aborted
        await self.db.rollback()
        await self.db.refresh(generation)
        self.log.warning("generation %s failed: %s", generation.id, message)
        return await self._finish(
            generation, GenerationStatus.error, {"error": message}, "error", message
        )

    async def _finish(
        self,
        generation: Generation,
        status: GenerationStatus,
        meta: Dict[str, Any],
        event_type: str,
        message: str,
    ) -> Generation:
        if not can_transition_generation(generation.status, status):
            raise ConflictError("INVALID_STATUS_TRANSITION", f"{generation.status.value} -> {status.value}")
        # the status predicate makes the terminal transition happen at most once
        res = await self.db.execute(
            update(Generation)
            .where(Generation.id == generation.id, Generation.status == GenerationStatus.pending)
            .values({Generation.status: status, Generation.meta: meta})
        )
        if res.rowcount == 0:
            await self.db.rollback()
            self.log.warning("generation %s left pending state elsewhere; keeping it", generation.id)
        else:
            self.db.add(
                GenerationLog(generation_id=generation.id, event_type=event_type, message=message)
            )
            await self.db.commit()
        await self.db.refresh(generation)
        return generation


async def run_generation(generation_id: int, user_id: str, client: OpenRouterClient) -> None:
    """Background entry point: own session, outcome always lands on the row."""
    make_session = await session_factory()
    async with make_session() as db:
        await GenerationService(db, user_id).complete_generation(generation_id, client)
