"""
Pytest configuration and fixtures for survey_popup tests.

This module provides reusable test fixtures including:
- Sample question payloads as served by the survey service
- A stub survey service built on httpx.MockTransport
- Sessions wired to the stub service and a fixed tab URL

No test touches the network or a real browser.
"""
from __future__ import annotations

import json
from typing import Any, Callable, Optional

import httpx
import pytest

from survey_popup.api.client import SurveyApiClient
from survey_popup.browser.probe import StaticHostContext
from survey_popup.config import SurveyConfig
from survey_popup.session.machine import SurveySession


QUESTIONS_URL = "https://survey.test/api/surveyQuestions"
ANSWERS_URL = "https://survey.test/api/surveyAnswers"


# =============================================================================
# PAYLOAD FIXTURES
# =============================================================================

@pytest.fixture
def color_payload() -> dict[str, Any]:
    """Single multiple choice question."""
    return {
        "questions": [
            {
                "id": "q1",
                "question": "Color?",
                "answerType": "multiple_choice",
                "options": ["Red", "Blue"],
            }
        ]
    }


@pytest.fixture
def two_question_payload() -> dict[str, Any]:
    """Two free text questions."""
    return {
        "questions": [
            {"id": "q1", "question": "What brought you here?", "answerType": "text"},
            {"id": "q2", "question": "Anything else?", "answerType": "text"},
        ]
    }


@pytest.fixture
def mixed_payload() -> dict[str, Any]:
    """Three questions of mixed kinds."""
    return {
        "questions": [
            {"id": "name", "question": "Your role?", "answerType": "text"},
            {
                "id": "rating",
                "question": "How useful was this page?",
                "answerType": "multiple_choice",
                "options": ["Very", "Somewhat", "Not at all"],
            },
            {"id": "comment", "question": "Comments?", "answerType": "open_ended"},
        ]
    }


# =============================================================================
# STUB SURVEY SERVICE
# =============================================================================

class StubSurveyService:
    """
    Records requests and answers them with canned responses.

    Attributes:
        questions_status: Status returned for GET questions.
        questions_body: Body returned for GET questions (dict or raw str).
        answers_status: Status returned for POST answers.
        fail_with: Exception raised for every request, if set.
        requests: All requests seen, in order.
    """

    def __init__(self, questions_body: Any = None) -> None:
        self.questions_status = 200
        self.questions_body = questions_body if questions_body is not None else {"questions": []}
        self.answers_status = 200
        self.fail_with: Optional[Exception] = None
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            raise self.fail_with

        if request.method == "GET" and str(request.url) == QUESTIONS_URL:
            if isinstance(self.questions_body, str):
                return httpx.Response(self.questions_status, text=self.questions_body)
            return httpx.Response(self.questions_status, json=self.questions_body)

        if request.method == "POST" and str(request.url) == ANSWERS_URL:
            return httpx.Response(self.answers_status, json={"ok": self.answers_status < 400})

        return httpx.Response(404, json={"error": "not found"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def fetches(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "GET"]

    @property
    def submissions(self) -> list[dict[str, str]]:
        return [json.loads(r.content) for r in self.requests if r.method == "POST"]


@pytest.fixture
def survey_config() -> SurveyConfig:
    """Config pointing at the stub service."""
    return SurveyConfig(questions_url=QUESTIONS_URL, answers_url=ANSWERS_URL)


@pytest.fixture
def stub_service() -> StubSurveyService:
    """An empty stub service; tests set its payload."""
    return StubSurveyService()


@pytest.fixture
def make_session(
    survey_config: SurveyConfig,
    stub_service: StubSurveyService,
) -> Callable[..., SurveySession]:
    """
    Factory for sessions wired to the stub service.

    Args:
        payload: Question payload to serve (optional).
        tab_url: Active tab URL reported by the host probe.
    """
    def _make(payload: Any = None, tab_url: Optional[str] = "https://example.com/page") -> SurveySession:
        if payload is not None:
            stub_service.questions_body = payload
        client = SurveyApiClient(survey_config, transport=stub_service.transport)
        return SurveySession(client, StaticHostContext(tab_url), survey_config)

    return _make

