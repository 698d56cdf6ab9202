"""
Survey service access.

- SurveyApiClient: Fetches the question list and posts answers
- SurveyServiceError and subclasses: Load and submit failures
"""
from .client import SurveyApiClient
from .errors import SurveyLoadError, SurveyServiceError, SurveySubmitError

__all__ = [
    "SurveyApiClient",
    "SurveyLoadError",
    "SurveyServiceError",
    "SurveySubmitError",
]
