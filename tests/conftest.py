"""
Shared fixtures: in-memory SQLite (aiosqlite) per test, a fake model client
injected through the `get_model_client` dependency, and token helpers.
"""
from __future__ import annotations

import asyncio
import json
from typing import Any, Dict

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from config import settings
from main import app
from services import db
from services.auth import create_token
from services.openrouter import ModelRequestError, get_model_client

SQLITE_URL = "sqlite+aiosqlite://"

# 3 days × 2 meals, numbered from 0 as the system message demands
PLAN: Dict[str, Any] = {
    "diet_plan": [
        {
            "day": d,
            "meals": [
                {
                    "meal_number_in_day": 0,
                    "name": f"Oat porridge with apple, day {d + 1}",
                    "calories": 650,
                    "meal_type": "breakfast",
                    "ingredients": [
                        {"name": "oat flakes", "quantity": "80 g"},
                        {"name": "apple", "quantity": "1 pc"},
                    ],
                },
                {
                    "meal_number_in_day": 1,
                    "name": f"Pierogi with cottage cheese, day {d + 1}",
                    "calories": 1550,
                    "meal_type": "dinner",
                    "ingredients": [
                        {"name": "pierogi", "quantity": "12 pcs"},
                        {"name": "sour cream", "quantity": "2 tbsp"},
                    ],
                },
            ],
        }
        for d in range(3)
    ],
    "shopping_list": [
        {"name": "oat flakes", "quantity": "240 g"},
        {"name": "apple", "quantity": "3 pcs"},
        {"name": "pierogi", "quantity": "36 pcs"},
    ],
}

PARAMS = {
    "number_of_days": 3,
    "calories_per_day": 2200,
    "meals_per_day": 2,
    "preferred_cuisines": ["polish"],
}


def completion(plan: Dict[str, Any] | None = None, content: str | None = None) -> Dict[str, Any]:
    """Chat-completions response carrying `plan` as its message content."""
    return {
        "id": "gen-test",
        "object": "chat.completion",
        "model": "openai/gpt-4o-mini",
        "choices": [
            {
                "index": 0,
                "message": {
                    "role": "assistant",
                    "content": content if content is not None else json.dumps(plan or PLAN),
                },
                "finish_reason": "stop",
            }
        ],
    }


class FakeModelClient:
    def __init__(self, response: Dict[str, Any] | None = None, error: Exception | None = None):
        self.response = response or completion()
        self.error = error
        self.prompts: list[str] = []

    async def request_completion(self, prompt: str) -> Dict[str, Any]:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.response


def auth(user_id: str = "user-1") -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_token(user_id)}"}


# ───────── fixtures ─────────────────────────────────────────────────

@pytest.fixture
def model() -> FakeModelClient:
    return FakeModelClient()


@pytest.fixture
def failing_model() -> FakeModelClient:
    return FakeModelClient(error=ModelRequestError("API request failed: Status: 503"))


@pytest.fixture
def client(model, monkeypatch):
    eng = create_async_engine(
        SQLITE_URL, connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    monkeypatch.setattr(db, "_ENGINE", eng)
    monkeypatch.setattr(db, "_SESSIONS", None)
    monkeypatch.setattr(settings, "generation_mode", "sync")
    monkeypatch.setattr(settings, "auto_create_tables", True)

    app.dependency_overrides[get_model_client] = lambda: model
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def run_db():
    """Run `fn(session)` against a fresh schema inside one event loop."""

    def _run(fn):
        async def _main():
            eng = create_async_engine(
                SQLITE_URL, connect_args={"check_same_thread": False}, poolclass=StaticPool
            )
            async with eng.begin() as conn:
                await conn.run_sync(db.Base.metadata.create_all)
            make_session = async_sessionmaker(eng, expire_on_commit=False)
            try:
                async with make_session() as session:
                    return await fn(session)
            finally:
                await eng.dispose()

        return asyncio.run(_main())

    return _run


# ───────── API helpers ──────────────────────────────────────────────

def new_generation(client: TestClient, headers: Dict[str, str], **overrides) -> int:
    r = client.post("/api/v1/generations", json={**PARAMS, **overrides}, headers=headers)
    assert r.status_code == 202, r.text
    return r.json()["generation_id"]


def new_diet(client: TestClient, headers: Dict[str, str], number_of_days: int = 3) -> Dict[str, Any]:
    gid = new_generation(client, headers, number_of_days=number_of_days)
    r = client.post(
        "/api/v1/diets",
        json={
            "number_of_days": number_of_days,
            "calories_per_day": 2200,
            "preferred_cuisines": ["polish"],
            "generation_id": gid,
        },
        headers=headers,
    )
    assert r.status_code == 201, r.text
    return r.json()
