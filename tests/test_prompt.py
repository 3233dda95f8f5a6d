# tests/test_prompt.py
from __future__ import annotations

import copy
import json

import pytest

from core.models.commands import GenerationParams
from core.models.plan import PlanParseError, extract_json, plan_from_completion
from core.promotion import flatten_meals, plan_problems, shopping_items
from core.prompt import RESPONSE_FORMAT, SYSTEM_MESSAGE, build_prompt

from tests.conftest import PARAMS, PLAN, completion

P = GenerationParams(**PARAMS)


# ── prompt text ─────────────────────────────────────────────────────
def test_prompt_carries_all_parameters():
    text = build_prompt(P)
    assert "3-day diet plan" in text
    assert "2200 kcal per day" in text
    assert "2 meals per day" in text
    assert "Preferred cuisines: polish." in text
    assert "Allergies" not in text


def test_prompt_is_deterministic():
    assert build_prompt(P, ["peanuts"], "no pork") == build_prompt(P, ["peanuts"], "no pork")


def test_prompt_mentions_allergies_and_preferences():
    text = build_prompt(P, ["peanuts", "shellfish"], "  mostly fish  ")
    assert "Allergies (never use these ingredients): peanuts, shellfish." in text
    assert text.endswith("Dietary preferences: mostly fish.")


def test_prompt_without_cuisines():
    text = build_prompt(GenerationParams(**{**PARAMS, "preferred_cuisines": []}))
    assert "Preferred cuisines" not in text


def test_system_message_asks_for_zero_based_numbering():
    assert "starting from 0" in SYSTEM_MESSAGE


def test_response_format_requires_both_keys():
    schema = RESPONSE_FORMAT["json_schema"]["schema"]
    assert schema["required"] == ["diet_plan", "shopping_list"]
    assert schema["additionalProperties"] is False
    meal_types = schema["properties"]["diet_plan"]["items"]["properties"]["meals"]["items"][
        "properties"
    ]["meal_type"]["enum"]
    assert "second breakfast" in meal_types


# ── plan parsing ────────────────────────────────────────────────────
def test_plan_from_plain_json_content():
    plan = plan_from_completion(completion())
    assert len(plan.diet_plan) == 3
    assert plan.diet_plan[0].day == 0
    assert plan.diet_plan[0].meals[0].meal_number_in_day == 0


def test_plan_from_fenced_content():
    fenced = "Here you go:\n```json\n" + json.dumps(PLAN) + "\n```"
    plan = plan_from_completion(completion(content=fenced))
    assert len(plan.shopping_list) == 3


def test_extract_json_accepts_dicts():
    assert extract_json({"a": 1}) == {"a": 1}


@pytest.mark.parametrize(
    "response",
    [
        {},
        {"choices": []},
        completion(content=""),
        completion(content="not json at all"),
        completion(content="[1, 2]"),
        completion(content=json.dumps({"diet_plan": []})),
    ],
)
def test_off_contract_output_is_rejected(response):
    with pytest.raises(PlanParseError):
        plan_from_completion(response)


def test_unknown_meal_type_is_rejected():
    bad = copy.deepcopy(PLAN)
    bad["diet_plan"][0]["meals"][0]["meal_type"] = "brunch"
    with pytest.raises(PlanParseError):
        plan_from_completion(completion(bad))


# ── preview → commands ──────────────────────────────────────────────
def test_flatten_uses_position_not_model_day():
    shifted = copy.deepcopy(PLAN)
    for entry in shifted["diet_plan"]:
        entry["day"] += 1                      # model counted from 1
    meals = flatten_meals(plan_from_completion(completion(shifted)))

    assert [m.day for m in meals] == [0, 0, 1, 1, 2, 2]
    assert meals[0].meal_type.value == "breakfast"
    assert meals[0].approx_calories == 650
    assert meals[0].instructions.splitlines() == [
        "Oat porridge with apple, day 1",
        "oat flakes 80 g",
        "apple 1 pc",
    ]


def test_fractional_calories_are_rounded():
    plan = copy.deepcopy(PLAN)
    plan["diet_plan"][0]["meals"][0]["calories"] = 612.6
    assert flatten_meals(plan_from_completion(completion(plan)))[0].approx_calories == 613


def test_shopping_items_are_name_dash_quantity():
    items = shopping_items(plan_from_completion(completion()))
    assert items == ["oat flakes - 240 g", "apple - 3 pcs", "pierogi - 36 pcs"]


# ── preview vs. request ─────────────────────────────────────────────
def _problems(plan, **params):
    return plan_problems(plan_from_completion(completion(plan)), GenerationParams(**{**PARAMS, **params}))


def test_matching_plan_has_no_problems():
    assert _problems(PLAN) == []


def test_day_count_must_match_request():
    assert _problems(PLAN, number_of_days=4) == ["plan has 3 day(s), 4 requested"]


def test_too_many_meals_and_repeated_slot():
    plan = copy.deepcopy(PLAN)
    plan["diet_plan"][1]["meals"].append(copy.deepcopy(plan["diet_plan"][1]["meals"][0]))
    problems = _problems(plan)
    assert "day 1 has 3 meals, at most 2 requested" in problems
    assert "day 1 repeats breakfast" in problems


def test_empty_day_is_a_problem():
    plan = copy.deepcopy(PLAN)
    plan["diet_plan"][2]["meals"] = []
    assert _problems(plan) == ["day 2 has no meals"]


def test_overlong_shopping_item_is_rejected_not_cut():
    plan = copy.deepcopy(PLAN)
    plan["shopping_list"].append({"name": "x" * 250, "quantity": "1"})
    assert len(shopping_items(plan_from_completion(completion(plan)))[-1]) == 254
    (problem,) = _problems(plan)
    assert "offending positions: 3" in problem
