
# =============================================================================
# Question Models
# Used for: Parsing the survey service's question list
# =============================================================================
from .question import (
    AnswerKind,  # Enum: FREE_TEXT, MULTIPLE_CHOICE
    Question,  # Single survey question
    QuestionSet,  # Ordered questions of one survey
)

# =============================================================================
# Session Models
# Used for: Snapshotting the session state machine
# =============================================================================
from .session_state import (
    FailureReason,  # Enum: LOAD_ERROR, SUBMIT_ERROR
    SessionState,  # Immutable session snapshot
    SessionStatus,  # Enum: LOADING, BLOCKED, WELCOME, ...
    LOAD_ERROR_MESSAGE,
    SUBMIT_ERROR_MESSAGE,
)

# =============================================================================
# Public API
# =============================================================================
__all__ = [
    # Questions
    "AnswerKind",
    "Question",
    "QuestionSet",

    # Session
    "FailureReason",
    "SessionState",
    "SessionStatus",
    "LOAD_ERROR_MESSAGE",
    "SUBMIT_ERROR_MESSAGE",
]
