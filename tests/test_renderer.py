"""
Test suite for the question renderer.

Run with: pytest tests/test_renderer.py -v
"""
from __future__ import annotations

import pytest

from survey_popup.models import (
    FailureReason,
    QuestionSet,
    SessionState,
    SessionStatus,
    LOAD_ERROR_MESSAGE,
    SUBMIT_ERROR_MESSAGE,
)
from survey_popup.session.renderer import ChoiceControl, FreeTextControl, render_view


@pytest.fixture
def mixed_questions(mixed_payload) -> QuestionSet:
    return QuestionSet.model_validate(mixed_payload)


def _in_progress(cursor: int, draft: str = "") -> SessionState:
    return SessionState(status=SessionStatus.IN_PROGRESS, cursor=cursor, draft=draft)


class TestQuestionView:
    """Test suite for IN_PROGRESS rendering."""

    def test_free_text_question(self, mixed_questions):
        """Test the first question: text field, progress, disabled buttons."""
        view = render_view(_in_progress(0), mixed_questions)

        panel = view.question
        assert panel.prompt == "Your role?"
        assert isinstance(panel.control, FreeTextControl)
        assert panel.control.value == ""
        assert panel.control.placeholder == "Type your answer here..."
        assert panel.progress == pytest.approx(1 / 3)
        assert panel.progress_text == "Question 1 of 3"
        assert not view.is_enabled("previous")
        assert not view.is_enabled("next")
        assert view.action("next").label == "Next"

    def test_choice_question_preselects_draft(self, mixed_questions):
        """Test that the option equal to the draft is selected."""
        view = render_view(_in_progress(1, "Somewhat"), mixed_questions)

        control = view.question.control
        assert isinstance(control, ChoiceControl)
        assert [o.value for o in control.options] == ["Very", "Somewhat", "Not at all"]
        assert [o.selected for o in control.options] == [False, True, False]
        assert control.selected_value == "Somewhat"
        assert view.is_enabled("previous")
        assert view.is_enabled("next")

    def test_choice_question_without_draft(self, mixed_questions):
        view = render_view(_in_progress(1), mixed_questions)

        assert view.question.control.selected_value is None

    def test_last_question_submits(self, mixed_questions):
        """Test the Submit label and full progress on the last question."""
        view = render_view(_in_progress(2, "done"), mixed_questions)

        assert view.question.is_last
        assert view.question.progress == pytest.approx(1.0)
        assert view.action("next").label == "Submit Survey"
        assert view.is_enabled("next")

    def test_whitespace_draft_disables_next(self, mixed_questions):
        view = render_view(_in_progress(2, "   "), mixed_questions)

        assert not view.is_enabled("next")
        assert view.question.control.value == "   "

    def test_in_progress_without_questions_raises(self):
        with pytest.raises(ValueError):
            render_view(_in_progress(0), None)


class TestStatusViews:
    """Test suite for the fixed views."""

    def test_loading(self):
        view = render_view(SessionState(), None)

        assert view.status is SessionStatus.LOADING
        assert view.busy
        assert view.actions == []

    def test_blocked(self):
        view = render_view(SessionState(status=SessionStatus.BLOCKED), None)

        assert view.title == "Survey Not Available"
        assert view.message == "No surveys are supported for this page."
        assert view.actions == []

    def test_welcome_shows_question_count(self, mixed_questions):
        view = render_view(SessionState(status=SessionStatus.WELCOME), mixed_questions)

        assert view.message == "Help us improve by answering 3 quick questions."
        assert view.is_enabled("start")
        assert view.action("start").label == "Start Survey"

    def test_welcome_with_no_questions_disables_start(self):
        view = render_view(SessionState(status=SessionStatus.WELCOME), QuestionSet())

        assert not view.is_enabled("start")

    def test_submitting(self):
        view = render_view(SessionState(status=SessionStatus.SUBMITTING), None)

        assert view.busy
        assert view.message == "Submitting your responses..."

    def test_success_offers_reset(self):
        view = render_view(SessionState(status=SessionStatus.SUCCESS), None)

        assert view.title == "Thank You!"
        assert view.action("reset").label == "Take Survey Again"
        assert view.failure is None

    @pytest.mark.parametrize("reason, message", [
        (FailureReason.LOAD_ERROR, LOAD_ERROR_MESSAGE),
        (FailureReason.SUBMIT_ERROR, SUBMIT_ERROR_MESSAGE),
    ])
    def test_failed_shows_reason_and_retry(self, reason, message):
        view = render_view(SessionState(status=SessionStatus.FAILED, failure=reason), None)

        assert view.title == "Something went wrong"
        assert view.failure is reason
        assert view.message == message
        assert view.is_enabled("retry")

    def test_view_serializes(self, mixed_questions):
        """Test that views dump to JSON-compatible dicts."""
        data = render_view(_in_progress(1, "Very"), mixed_questions).model_dump(mode="json")

        assert data["status"] == "in_progress"
        assert data["question"]["control"]["kind"] == "choice"
        assert data["question"]["control"]["options"][0] == {"value": "Very", "selected": True}
