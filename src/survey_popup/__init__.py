"""
Survey Popup - short user surveys served by a remote survey service.

The popup runs one survey session per open:
1. Check the active tab against the disallowed domains (Host Probe)
2. Fetch the question list (Survey Service Client)
3. Walk the questions, keeping answers across back/forward (Session)
4. Submit the answers, with reset and retry on failure (Session)

Quick Start:
    >>> from survey_popup import SurveySession, render_view
    >>>
    >>> session = SurveySession.create(tab_url="https://example.com")
    >>> await session.initialize()
    >>> view = render_view(session.state, session.questions)

CLI Usage:
    $ python -m survey_popup run -u https://example.com

Modules:
    - api: Survey service client and errors
    - browser: Active tab probes
    - models: Data models (Question, QuestionSet, SessionState)
    - session: State machine and renderer
    - web: Flask JSON shell
"""
from .config import SurveyConfig
from .main import run_cli
from .session import PopupView, SurveySession, render_view

__version__ = "0.1.0"

__all__ = [
    "PopupView",
    "SurveyConfig",
    "SurveySession",
    "render_view",
    "run_cli",
    "__version__",
]
