"""
Test suite for the terminal shell and CLI.

Run with: pytest tests/test_cli.py -v
"""
from __future__ import annotations

from unittest.mock import patch

import pytest
from click.testing import CliRunner

from survey_popup.browser.probe import BrowserHostContext, StaticHostContext
from survey_popup.config import SurveyConfig
from survey_popup.main import build_session, cli


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def _run(runner, make_session, payload, user_input, tab_url="https://example.com"):
    with patch("survey_popup.main.build_session", return_value=make_session(payload, tab_url=tab_url)):
        return runner.invoke(cli, ["run", "-u", tab_url], input=user_input)


class TestBuildSession:
    """Test suite for probe selection."""

    def test_static_probe_by_default(self):
        session = build_session(SurveyConfig(), tab_url="https://example.com")

        assert isinstance(session.host, StaticHostContext)
        assert session.host.url == "https://example.com"

    def test_browser_probe(self):
        config = SurveyConfig(cdp_endpoint="http://127.0.0.1:9333")
        session = build_session(config, use_browser=True)

        assert isinstance(session.host, BrowserHostContext)
        assert session.host.cdp_endpoint == "http://127.0.0.1:9333"


class TestTerminalShell:
    """Test suite for the interactive run command."""

    def test_choice_survey_submits(self, runner, make_session, stub_service, color_payload):
        """Test answering a choice question by number."""
        result = _run(runner, make_session, color_payload, "y\n2\nn\n")

        assert result.exit_code == 0, result.output
        assert "Help us improve by answering 1 quick questions." in result.output
        assert "Thank You!" in result.output
        assert stub_service.submissions == [{"q1": "Blue"}]

    def test_back_and_forth_keeps_answers(self, runner, make_session, stub_service, two_question_payload):
        """Test :prev re-shows the committed answer and enter keeps it."""
        user_input = "\n".join(["y", "A", ":prev", "", "B", "n"]) + "\n"

        result = _run(runner, make_session, two_question_payload, user_input)

        assert result.exit_code == 0, result.output
        assert stub_service.submissions == [{"q1": "A", "q2": "B"}]

    def test_blank_answer_is_rejected(self, runner, make_session, stub_service, color_payload):
        result = _run(runner, make_session, color_payload, "y\n\n1\nn\n")

        assert "An answer is required." in result.output
        assert stub_service.submissions == [{"q1": "Red"}]

    def test_choice_outside_options_is_reprompted(self, runner, make_session, stub_service, color_payload):
        """Test that an out-of-range number or unknown text asks again."""
        result = _run(runner, make_session, color_payload, "y\n5\nPurple\n2\nn\n")

        assert result.exit_code == 0, result.output
        assert result.output.count("Pick one of the listed options.") == 2
        assert stub_service.submissions == [{"q1": "Blue"}]

    def test_choice_by_option_text(self, runner, make_session, stub_service, color_payload):
        result = _run(runner, make_session, color_payload, "y\nRed\nn\n")

        assert result.exit_code == 0, result.output
        assert stub_service.submissions == [{"q1": "Red"}]

    def test_blocked_tab_exits_cleanly(self, runner, make_session, stub_service, color_payload):
        result = _run(runner, make_session, color_payload, "", tab_url="https://sabiventures.com")

        assert result.exit_code == 0
        assert "Survey Not Available" in result.output
        assert stub_service.requests == []

    def test_submit_failure_exit_code(self, runner, make_session, stub_service, color_payload):
        """Test that closing on a failure exits with status 1."""
        stub_service.answers_status = 500

        result = _run(runner, make_session, color_payload, "y\n1\nn\n")

        assert result.exit_code == 1
        assert "Failed to submit survey. Please try again." in result.output

    def test_quit_mid_survey(self, runner, make_session, stub_service, two_question_payload):
        result = _run(runner, make_session, two_question_payload, "y\n:quit\n")

        assert result.exit_code == 0
        assert stub_service.submissions == []


def test_version(runner):
    result = runner.invoke(cli, ["version"])

    assert result.exit_code == 0
    assert "Survey Popup v0.1.0" in result.output
