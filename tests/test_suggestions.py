"""Tests for model output parsing and the suggestion routes."""
import json

import pytest

from ai_client import parse_model_json, strip_code_fence
from database import DIETARY, HEALTHCARE, PERFORMANCE, set_document
from errors import ParseError


def test_strip_code_fence_json():
    assert strip_code_fence('```json\n{"a": 1}\n```') == '{"a": 1}'


def test_strip_code_fence_plain_fence():
    assert strip_code_fence('```\n{"a": 1}\n```\n') == '{"a": 1}'


def test_strip_code_fence_leaves_bare_text():
    assert strip_code_fence('  {"a": 1} ') == '{"a": 1}'


def test_parse_model_json():
    assert parse_model_json('```json\n{"tips": ["sleep more"]}\n```') == {"tips": ["sleep more"]}


@pytest.mark.parametrize("reply", ["Here are some tips: drink water", "```json\n[1, 2]\n```", ""])
def test_parse_model_json_failures(reply):
    with pytest.raises(ParseError):
        parse_model_json(reply)


@pytest.fixture
def complete_athlete(db, seed):
    seed("Athlete", "a1")
    set_document(db, DIETARY, "a1", {"dietaryPlan": {"calories_per_day": 2500}})
    set_document(db, HEALTHCARE, "a1", {"sleep_hours": 6, "bmi": 23.1})
    set_document(db, PERFORMANCE, "a1", {"wins": 4, "losses": 6})


def test_dietary_suggestion(client, auth_headers, ai, complete_athlete):
    ai.queue('```json\n{"calorie_intake": "3000 kcal"}\n```')

    response = client.get("/suggestion/dietary/a1", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["dietarySuggestion"] == {"calorie_intake": "3000 kcal"}
    prompt = ai.prompts[0]
    assert json.dumps({"calories_per_day": 2500}) in prompt
    assert '"sleep_hours": 6' in prompt


def test_performance_suggestion(client, auth_headers, ai, complete_athlete):
    ai.queue('{"training_adjustments": "more sparring"}')
    response = client.get("/suggestion/performance/a1", headers=auth_headers)
    assert response.json()["performanceSuggestion"]["training_adjustments"] == "more sparring"


def test_suggestion_unparseable_reply(client, auth_headers, ai, complete_athlete):
    ai.queue("Sorry, I cannot help with that.")
    response = client.get("/suggestion/healthcare/a1", headers=auth_headers)
    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Failed to parse AI response"}


def test_suggestion_missing_athlete(client, auth_headers, ai):
    response = client.get("/suggestion/healthcare/ghost", headers=auth_headers)
    assert response.status_code == 404
    assert ai.prompts == []


def test_suggestion_incomplete_data(client, auth_headers, ai, seed):
    seed("Athlete", "a1")
    response = client.get("/suggestion/dietary/a1", headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Incomplete data for dietary suggestions"
    assert ai.prompts == []


def test_chatbot_truncates(client, auth_headers, ai):
    ai.queue("x" * 600)
    response = client.post("/suggestion/chat", json={"userId": "u1", "question": "How much water?"}, headers=auth_headers)
    answer = response.json()["response"]
    assert len(answer) == 503
    assert answer.endswith("...")
    assert "How much water?" in ai.prompts[0]


def test_chatbot_requires_question(client, auth_headers):
    response = client.post("/suggestion/chat", json={"userId": "u1"}, headers=auth_headers)
    assert response.status_code == 400
