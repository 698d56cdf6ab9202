"""
Survey Popup Web Shell.

Provides a Flask JSON API around a SurveySession.

Usage:
    python -m survey_popup web
"""
from .app import create_app

__all__ = ["create_app"]
