"""
Runtime configuration for the survey popup.

Every setting can be passed explicitly, overridden through an environment
variable, or left to its default:
- SURVEY_QUESTIONS_URL: Question-list endpoint
- SURVEY_ANSWERS_URL: Answer-submission endpoint
- SURVEY_BLOCKED_DOMAINS: Comma separated list of disallowed domains
- SURVEY_HTTP_TIMEOUT: Request timeout in seconds (default: 30)
- BROWSER_CDP_ENDPOINT: Chromium DevTools endpoint used by the host probe

Example Usage:
    >>> from survey_popup.config import SurveyConfig
    >>>
    >>> config = SurveyConfig.from_env()
    >>> config.is_blocked("https://www.sabiventures.com/team")
    True
"""
from __future__ import annotations

import logging
import os
from typing import Optional

from pydantic import BaseModel, Field, field_validator


__all__ = [
    "SurveyConfig",
    "DEFAULT_QUESTIONS_URL",
    "DEFAULT_ANSWERS_URL",
    "DEFAULT_BLOCKED_DOMAINS",
]

logger = logging.getLogger(__name__)


DEFAULT_QUESTIONS_URL = "https://mockbackend.vercel.app/api/surveyQuestions"
DEFAULT_ANSWERS_URL = "https://mockbackend.vercel.app/api/surveyAnswers"
DEFAULT_BLOCKED_DOMAINS = ("sabiventures.com",)
DEFAULT_TIMEOUT = 30.0
DEFAULT_CDP_ENDPOINT = "http://localhost:9222"


class SurveyConfig(BaseModel):
    """
    Endpoints and policies for one survey popup.

    Attributes:
        questions_url: GET endpoint returning the question set.
        answers_url: POST endpoint receiving the answer map.
        blocked_domains: Substrings that disqualify the active tab URL.
        timeout: Per-request timeout in seconds.
        cdp_endpoint: DevTools endpoint of the browser to probe.
    """
    questions_url: str = Field(default=DEFAULT_QUESTIONS_URL, description="Question-list endpoint")
    answers_url: str = Field(default=DEFAULT_ANSWERS_URL, description="Answer-submission endpoint")
    blocked_domains: tuple[str, ...] = Field(
        default=DEFAULT_BLOCKED_DOMAINS,
        description="Disallowed domains (substring match on the tab URL)"
    )
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0.0, description="Request timeout (s)")
    cdp_endpoint: str = Field(default=DEFAULT_CDP_ENDPOINT, description="Chromium DevTools endpoint")

    model_config = {"frozen": True}

    @field_validator("blocked_domains", mode="before")
    @classmethod
    def split_domains(cls, v):
        """Accept a comma separated string as well as a sequence."""
        if isinstance(v, str):
            v = v.split(",")
        return tuple(d.strip() for d in v if d and d.strip())

    @classmethod
    def from_env(
        cls,
        questions_url: Optional[str] = None,
        answers_url: Optional[str] = None,
        blocked_domains: Optional[str] = None,
        timeout: Optional[float] = None,
        cdp_endpoint: Optional[str] = None,
    ) -> "SurveyConfig":
        """
        Build a config from parameters, environment variables and defaults.

        Explicit parameters win over environment variables, which win
        over the built-in defaults.
        """
        config = cls(
            questions_url=cls._get_str_config(questions_url, "SURVEY_QUESTIONS_URL", DEFAULT_QUESTIONS_URL),
            answers_url=cls._get_str_config(answers_url, "SURVEY_ANSWERS_URL", DEFAULT_ANSWERS_URL),
            blocked_domains=cls._get_str_config(
                blocked_domains, "SURVEY_BLOCKED_DOMAINS", ",".join(DEFAULT_BLOCKED_DOMAINS)
            ),
            timeout=cls._get_float_config(timeout, "SURVEY_HTTP_TIMEOUT", DEFAULT_TIMEOUT),
            cdp_endpoint=cls._get_str_config(cdp_endpoint, "BROWSER_CDP_ENDPOINT", DEFAULT_CDP_ENDPOINT),
        )
        logger.debug(
            f"SurveyConfig loaded: questions_url={config.questions_url}, "
            f"answers_url={config.answers_url}, blocked={config.blocked_domains}"
        )
        return config

    @staticmethod
    def _get_str_config(value: Optional[str], env_var: str, default: str) -> str:
        """Get string config from parameter, env var, or default."""
        if value is not None:
            return value
        return os.environ.get(env_var, "").strip() or default

    @staticmethod
    def _get_float_config(value: Optional[float], env_var: str, default: float) -> float:
        """Get float config from parameter, env var, or default."""
        if value is not None:
            return value
        env_value = os.environ.get(env_var, "").strip()
        try:
            parsed = float(env_value)
        except ValueError:
            return default
        return parsed if parsed > 0 else default

    def is_blocked(self, url: Optional[str]) -> bool:
        """Check whether a tab URL falls under a disallowed domain."""
        if not url:
            return False
        return any(domain in url for domain in self.blocked_domains)
