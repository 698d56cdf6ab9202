from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


__all__ = [
    "SessionStatus",
    "FailureReason",
    "SessionState",
    "LOAD_ERROR_MESSAGE",
    "SUBMIT_ERROR_MESSAGE",
]


LOAD_ERROR_MESSAGE = "Failed to load survey questions. Please try again."
SUBMIT_ERROR_MESSAGE = "Failed to submit survey. Please try again."


class SessionStatus(str, Enum):
    """
    States of a survey session.

    LOADING is initial. BLOCKED has no way out.
    """
    LOADING = "loading"          # Probing host and fetching questions
    BLOCKED = "blocked"          # Active tab is on a disallowed domain
    WELCOME = "welcome"          # Questions loaded, waiting for start
    IN_PROGRESS = "in_progress"  # Answering question at cursor
    SUBMITTING = "submitting"    # Answers are being posted
    SUCCESS = "success"          # Answers accepted
    FAILED = "failed"            # Load or submit failed


class FailureReason(str, Enum):
    """Why a session ended up FAILED."""
    LOAD_ERROR = "load_error"      # Question fetch failed
    SUBMIT_ERROR = "submit_error"  # Answer submission failed

    @property
    def message(self) -> str:
        """User-facing message for this failure."""
        if self is FailureReason.LOAD_ERROR:
            return LOAD_ERROR_MESSAGE
        return SUBMIT_ERROR_MESSAGE


class SessionState(BaseModel):
    """
    Immutable snapshot of a session's state.

    ``cursor`` and ``draft`` only carry meaning while IN_PROGRESS;
    ``failure`` only while FAILED.

    Attributes:
        status: Current state tag.
        cursor: Zero-based index of the displayed question.
        draft: Unconfirmed answer text for the question at cursor.
        failure: Failure reason when FAILED.
    """
    status: SessionStatus = Field(default=SessionStatus.LOADING, description="State tag")
    cursor: int = Field(default=0, ge=0, description="Question cursor")
    draft: str = Field(default="", description="Answer draft for the current question")
    failure: Optional[FailureReason] = Field(default=None, description="Failure reason when FAILED")

    model_config = {"frozen": True}

    @property
    def error_message(self) -> Optional[str]:
        """User-facing failure text (None unless FAILED)."""
        return self.failure.message if self.failure else None

    @property
    def can_go_next(self) -> bool:
        """Whether the draft is enough to confirm the current question."""
        return self.status is SessionStatus.IN_PROGRESS and bool(self.draft.strip())

    @property
    def can_go_previous(self) -> bool:
        """Whether there is a previous question to return to."""
        return self.status is SessionStatus.IN_PROGRESS and self.cursor > 0

    def to_summary(self) -> dict[str, Any]:
        """Get a summarized version for logging."""
        summary: dict[str, Any] = {"status": self.status.value}
        if self.status is SessionStatus.IN_PROGRESS:
            summary["cursor"] = self.cursor
            summary["draft_length"] = len(self.draft)
        if self.failure:
            summary["failure"] = self.failure.value
        return summary
