"""
Survey service client - fetches questions and posts answers over HTTP.

Every call opens its own short-lived ``httpx.AsyncClient`` so the client
is not bound to a particular event loop.

Example Usage:
    >>> from survey_popup.api.client import SurveyApiClient
    >>>
    >>> client = SurveyApiClient()
    >>> questions = await client.fetch_questions()
    >>> await client.submit_answers({"q1": "Blue"})
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import httpx
from pydantic import ValidationError

from ..config import SurveyConfig
from ..models.question import QuestionSet
from .errors import SurveyLoadError, SurveySubmitError

__all__ = ["SurveyApiClient"]

logger = logging.getLogger(__name__)


class SurveyApiClient:
    """
    Client for the remote survey service.

    Attributes:
        questions_url: GET endpoint for the question list.
        answers_url: POST endpoint for the answer map.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        config: Optional[SurveyConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            config: Endpoints and timeout (default: SurveyConfig.from_env()).
            transport: Optional httpx transport (used to stub the service).
        """
        config = config or SurveyConfig.from_env()
        self.questions_url = config.questions_url
        self.answers_url = config.answers_url
        self.timeout = config.timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def fetch_questions(self) -> QuestionSet:
        """
        Fetch and parse the survey's question list.

        Returns:
            The parsed QuestionSet.

        Raises:
            SurveyLoadError: On network failure, non-2xx status or
                a body that is not a valid question list.
        """
        logger.info(f"Fetching survey questions from {self.questions_url}")

        try:
            async with self._client() as client:
                response = await client.get(self.questions_url)
        except httpx.HTTPError as e:
            logger.error(f"Question fetch failed: {e}")
            raise SurveyLoadError(f"Failed to fetch questions: {e}") from e

        if not response.is_success:
            logger.error(f"Question fetch returned status {response.status_code}")
            raise SurveyLoadError(
                f"Survey service returned status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
            question_set = self._parse_questions(payload)
        except (ValueError, ValidationError) as e:
            logger.error(f"Malformed question list: {e}")
            raise SurveyLoadError(
                f"Malformed question list: {e}",
                status_code=response.status_code,
            ) from e

        logger.info(f"Loaded {len(question_set)} survey questions: {question_set.ids}")
        return question_set

    @staticmethod
    def _parse_questions(payload: Any) -> QuestionSet:
        """Parse ``{"questions": [...]}`` into a QuestionSet."""
        if not isinstance(payload, dict) or not isinstance(payload.get("questions"), list):
            raise ValueError("expected an object with a 'questions' list")
        return QuestionSet.model_validate({"questions": payload["questions"]})

    async def submit_answers(self, answers: Mapping[str, str]) -> None:
        """
        Post the answer map to the survey service.

        Exactly one request is made; there is no retry.

        Args:
            answers: Mapping of question id to answer text.

        Raises:
            SurveySubmitError: On network failure or non-2xx status.
        """
        logger.info(f"Submitting {len(answers)} answers to {self.answers_url}")

        try:
            async with self._client() as client:
                response = await client.post(
                    self.answers_url,
                    json=dict(answers),
                    headers={"Content-Type": "application/json"},
                )
        except httpx.HTTPError as e:
            logger.error(f"Answer submission failed: {e}")
            raise SurveySubmitError(f"Failed to submit answers: {e}") from e

        if not response.is_success:
            logger.error(f"Answer submission returned status {response.status_code}")
            raise SurveySubmitError(
                f"Survey service returned status {response.status_code}",
                status_code=response.status_code,
            )

        logger.info("Survey answers submitted successfully")
