from __future__ import annotations

from typing import Optional


__all__ = [
    "SurveyServiceError",
    "SurveyLoadError",
    "SurveySubmitError",
]


class SurveyServiceError(Exception):
    """
    Base error for calls to the survey service.

    Attributes:
        status_code: HTTP status of the failed response, if one arrived.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SurveyLoadError(SurveyServiceError):
    """Question list could not be fetched or parsed."""


class SurveySubmitError(SurveyServiceError):
    """Answers could not be submitted."""
