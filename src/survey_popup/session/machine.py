"""
Survey session state machine.

The SurveySession owns everything one popup lifetime needs:
1. Domain gating of the active tab before anything is fetched
2. The question set, fetched once per successful load
3. The question cursor, the draft answer and the committed answers
4. The submit / retry / reset lifecycle

States:
    LOADING -> BLOCKED | WELCOME | FAILED(load)
    WELCOME -> IN_PROGRESS
    IN_PROGRESS -> IN_PROGRESS | SUBMITTING
    SUBMITTING -> SUCCESS | FAILED(submit)
    SUCCESS, FAILED(submit) -> WELCOME        (reset)
    FAILED(load) -> LOADING -> ...            (retry)

At most one network call is outstanding at any time: the session only
issues one from LOADING or SUBMITTING, and no navigation is possible
while in either state.

Example Usage:
    >>> from survey_popup.session import SurveySession
    >>>
    >>> session = SurveySession.create(tab_url="https://example.com")
    >>> await session.initialize()
    >>> session.start_survey()
    >>> session.update_draft("Blue")
    >>> await session.go_next()
    >>> session.state.status
    <SessionStatus.SUCCESS: 'success'>
"""
from __future__ import annotations

import logging
from typing import Mapping, Optional

from ..api.client import SurveyApiClient
from ..api.errors import SurveyServiceError
from ..browser.probe import HostContext, HostContextError, StaticHostContext
from ..config import SurveyConfig
from ..models.question import Question, QuestionSet
from ..models.session_state import FailureReason, SessionState, SessionStatus

__all__ = ["SurveySession"]

logger = logging.getLogger(__name__)


class SurveySession:
    """
    One survey interaction, from popup open to popup close.

    Synchronous actions return True when they changed the session and
    False when they were a no-op; no action raises for being invoked in
    the wrong state.

    Attributes:
        client: Survey service client.
        host: Source of the active tab URL.
        config: Endpoints and blocked domains.
    """

    def __init__(
        self,
        client: SurveyApiClient,
        host: HostContext,
        config: Optional[SurveyConfig] = None,
    ) -> None:
        self.client = client
        self.host = host
        self.config = config or SurveyConfig.from_env()

        self._state = SessionState()
        self._questions: Optional[QuestionSet] = None
        self._answers: dict[str, str] = {}
        self._in_flight = False

        logger.debug(f"SurveySession created with host={host!r}")

    @classmethod
    def create(
        cls,
        tab_url: Optional[str] = None,
        config: Optional[SurveyConfig] = None,
    ) -> "SurveySession":
        """Build a session for a known tab URL with the default client."""
        config = config or SurveyConfig.from_env()
        return cls(SurveyApiClient(config), StaticHostContext(tab_url), config)

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        """Current state snapshot."""
        return self._state

    @property
    def questions(self) -> Optional[QuestionSet]:
        """The loaded question set, None until a load succeeds."""
        return self._questions

    @property
    def answers(self) -> dict[str, str]:
        """Copy of the committed answers."""
        return dict(self._answers)

    @property
    def current_question(self) -> Optional[Question]:
        """Question at the cursor while IN_PROGRESS."""
        if self._state.status is not SessionStatus.IN_PROGRESS or self._questions is None:
            return None
        return self._questions[self._state.cursor]

    @property
    def is_busy(self) -> bool:
        """Whether a network call is outstanding."""
        return self._in_flight

    def _transition(self, **changes) -> None:
        previous = self._state.status
        self._state = self._state.model_copy(update=changes)
        if self._state.status is not previous:
            logger.info(f"Session {previous.value} -> {self._state.status.value}")

    def _seeded_draft(self, cursor: int) -> str:
        assert self._questions is not None
        return self._answers.get(self._questions[cursor].id, "")

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    async def initialize(self) -> bool:
        """
        Gate on the active tab, then fetch the question set.

        Allowed as the first operation and as the retry of a failed load.
        A blocked tab short-circuits before any request is made.

        Returns:
            True if the load was attempted, False if it was not allowed.
        """
        retrying = (
            self._state.status is SessionStatus.FAILED
            and self._state.failure is FailureReason.LOAD_ERROR
        )
        if self._in_flight or not (self._state.status is SessionStatus.LOADING or retrying):
            logger.debug(f"initialize ignored in state {self._state.status.value}")
            return False

        self._transition(status=SessionStatus.LOADING, failure=None)
        self._in_flight = True
        try:
            url = await self.host.active_tab_url()
            if self.config.is_blocked(url):
                logger.info(f"Survey blocked on {url}")
                self._transition(status=SessionStatus.BLOCKED)
                return True

            questions = await self.client.fetch_questions()

        except (HostContextError, SurveyServiceError) as e:
            logger.error(f"Survey load failed: {e}")
            self._transition(status=SessionStatus.FAILED, failure=FailureReason.LOAD_ERROR)
            return True
        except Exception:
            logger.exception("Unexpected error while loading survey")
            self._transition(status=SessionStatus.FAILED, failure=FailureReason.LOAD_ERROR)
            return True
        finally:
            self._in_flight = False

        self._questions = questions
        self._transition(status=SessionStatus.WELCOME)
        return True

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def start_survey(self) -> bool:
        """Leave WELCOME for the first question."""
        if self._state.status is not SessionStatus.WELCOME:
            logger.debug(f"start_survey ignored in state {self._state.status.value}")
            return False
        if self._questions is None or len(self._questions) == 0:
            logger.warning("start_survey ignored: survey has no questions")
            return False

        self._transition(status=SessionStatus.IN_PROGRESS, cursor=0, draft=self._seeded_draft(0))
        return True

    def update_draft(self, text: str) -> bool:
        """Replace the draft for the current question, verbatim."""
        if self._state.status is not SessionStatus.IN_PROGRESS:
            logger.debug(f"update_draft ignored in state {self._state.status.value}")
            return False
        self._transition(draft=text)
        return True

    async def go_next(self) -> bool:
        """
        Commit the draft and move forward, submitting after the last question.

        Commit and advance happen in one step; no state with the new
        cursor and an uncommitted answer is ever observable.

        Returns:
            True if the draft was committed, False for a no-op.
        """
        if not self._state.can_go_next:
            logger.debug(f"go_next ignored: {self._state.to_summary()}")
            return False

        assert self._questions is not None
        cursor = self._state.cursor
        question = self._questions[cursor]
        self._answers[question.id] = self._state.draft
        logger.debug(f"Committed answer for question {question.id}")

        if cursor < self._questions.last_index:
            new_cursor = cursor + 1
            self._transition(cursor=new_cursor, draft=self._seeded_draft(new_cursor))
            return True

        await self.submit_survey(dict(self._answers))
        return True

    def go_previous(self) -> bool:
        """Move back one question without committing the current draft."""
        if not self._state.can_go_previous:
            logger.debug(f"go_previous ignored: {self._state.to_summary()}")
            return False

        new_cursor = self._state.cursor - 1
        self._transition(cursor=new_cursor, draft=self._seeded_draft(new_cursor))
        return True

    # -------------------------------------------------------------------------
    # Submission and recovery
    # -------------------------------------------------------------------------

    async def submit_survey(self, final_answers: Mapping[str, str]) -> bool:
        """
        Post the final answers; one attempt, no automatic retry.

        Only reachable from IN_PROGRESS (via go_next).
        """
        if self._in_flight or self._state.status is not SessionStatus.IN_PROGRESS:
            logger.debug(f"submit_survey ignored in state {self._state.status.value}")
            return False

        self._transition(status=SessionStatus.SUBMITTING)
        self._in_flight = True
        try:
            await self.client.submit_answers(final_answers)
        except SurveyServiceError as e:
            logger.error(f"Survey submission failed: {e}")
            self._transition(status=SessionStatus.FAILED, failure=FailureReason.SUBMIT_ERROR)
            return True
        except Exception:
            logger.exception("Unexpected error while submitting survey")
            self._transition(status=SessionStatus.FAILED, failure=FailureReason.SUBMIT_ERROR)
            return True
        finally:
            self._in_flight = False

        self._transition(status=SessionStatus.SUCCESS)
        return True

    def reset_survey(self) -> bool:
        """
        Clear answers and return to WELCOME, reusing the loaded questions.

        A failed initial load has nothing to reuse; use retry() instead.
        """
        status = self._state.status
        if status not in (SessionStatus.SUCCESS, SessionStatus.FAILED) or self._questions is None:
            logger.debug(f"reset_survey ignored in state {status.value}")
            return False

        self._answers.clear()
        self._transition(status=SessionStatus.WELCOME, cursor=0, draft="", failure=None)
        return True

    async def retry(self) -> bool:
        """User-initiated recovery from FAILED."""
        if self._state.status is not SessionStatus.FAILED:
            logger.debug(f"retry ignored in state {self._state.status.value}")
            return False
        if self._state.failure is FailureReason.LOAD_ERROR:
            return await self.initialize()
        return self.reset_survey()
