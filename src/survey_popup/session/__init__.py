"""
Survey session core.

- SurveySession: State machine for one popup lifetime
- render_view: Pure projection of a session state onto a PopupView
"""
from .machine import SurveySession
from .renderer import PopupView, QuestionPanel, ViewAction, render_view

__all__ = [
    "PopupView",
    "QuestionPanel",
    "SurveySession",
    "ViewAction",
    "render_view",
]
