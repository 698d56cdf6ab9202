"""
Survey Popup Web Shell.

A Flask JSON API that exposes one SurveySession to a browser popup.
Every action answers with the freshly rendered view, so the front end
only ever draws what the state machine says.

Routes:
    GET  /api/health    Health check
    GET  /api/view      Current view (loads the survey on first call)
    POST /api/start     Start the survey
    POST /api/draft     Replace the draft: {"text": "..."}
    POST /api/next      Confirm the current answer (submits on the last)
    POST /api/previous  Go back one question
    POST /api/reset     Start over after success or a failed submit
    POST /api/retry     Recover from a failure

Run with:
    python -m survey_popup web --port 5000
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from threading import Lock
from typing import Any, Awaitable, Callable, Union

from flask import Flask, Response, current_app, jsonify, request

from ..models.session_state import SessionStatus
from ..session.machine import SurveySession
from ..session.renderer import render_view

__all__ = ["create_app"]

logger = logging.getLogger(__name__)

SESSION_KEY = "survey_session"
LOCK_KEY = "survey_lock"

ActionResult = Union[bool, Awaitable[bool]]


def _session() -> SurveySession:
    return current_app.extensions[SESSION_KEY]


def _view_payload(session: SurveySession, applied: bool) -> dict[str, Any]:
    view = render_view(session.state, session.questions)
    return {
        "applied": applied,
        "view": view.model_dump(mode="json"),
    }


def _perform(action: Callable[[SurveySession], ActionResult]) -> tuple[Response, int]:
    """Run one session action under the app lock and render the result."""
    session = _session()
    try:
        with current_app.extensions[LOCK_KEY]:
            result = action(session)
            if asyncio.iscoroutine(result):
                result = asyncio.run(result)
            return jsonify(_view_payload(session, bool(result))), 200
    except Exception as e:
        logger.exception("Error handling survey action")
        return jsonify({"error": str(e)}), 500


def create_app(session: SurveySession) -> Flask:
    """
    Create the Flask app serving one survey session.

    Args:
        session: The session this popup instance owns.
    """
    app = Flask(__name__)
    app.extensions[SESSION_KEY] = session
    app.extensions[LOCK_KEY] = Lock()

    @app.route("/api/health")
    def health():
        """Health check endpoint."""
        return jsonify({
            "status": "ok",
            "timestamp": datetime.now().isoformat(),
        })

    @app.route("/api/view")
    def view():
        """Current view; the first call starts loading the survey."""
        def load_if_needed(s: SurveySession) -> ActionResult:
            if s.state.status is SessionStatus.LOADING and not s.is_busy:
                return s.initialize()
            return False

        return _perform(load_if_needed)

    @app.route("/api/start", methods=["POST"])
    def start():
        return _perform(lambda s: s.start_survey())

    @app.route("/api/draft", methods=["POST"])
    def draft():
        data = request.get_json(silent=True)
        text = data.get("text") if isinstance(data, dict) else None
        if not isinstance(text, str):
            return jsonify({"error": "text is required"}), 400
        return _perform(lambda s: s.update_draft(text))

    @app.route("/api/next", methods=["POST"])
    def next_question():
        return _perform(lambda s: s.go_next())

    @app.route("/api/previous", methods=["POST"])
    def previous_question():
        return _perform(lambda s: s.go_previous())

    @app.route("/api/reset", methods=["POST"])
    def reset():
        return _perform(lambda s: s.reset_survey())

    @app.route("/api/retry", methods=["POST"])
    def retry():
        return _perform(lambda s: s.retry())

    logger.debug("Survey popup web app created")
    return app
