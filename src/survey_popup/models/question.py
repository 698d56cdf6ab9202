from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator


__all__ = [
    "AnswerKind",
    "Question",
    "QuestionSet",
]


class AnswerKind(str, Enum):
    """
    How a question expects to be answered.

    The survey service only distinguishes multiple choice; every other
    answer type it sends is treated as free text.
    """
    FREE_TEXT = "free_text"              # Single text field
    MULTIPLE_CHOICE = "multiple_choice"  # Mutually exclusive options

    @classmethod
    def from_wire(cls, value: Any) -> "AnswerKind":
        """
        Map the service's ``answerType`` value onto an AnswerKind.

        Example:
            >>> AnswerKind.from_wire("multiple_choice")
            <AnswerKind.MULTIPLE_CHOICE: 'multiple_choice'>
            >>> AnswerKind.from_wire("text")
            <AnswerKind.FREE_TEXT: 'free_text'>
        """
        if isinstance(value, AnswerKind):
            return value
        if value == cls.MULTIPLE_CHOICE.value:
            return cls.MULTIPLE_CHOICE
        return cls.FREE_TEXT


class Question(BaseModel):
    """
    A single survey question as served by the survey service.

    Attributes:
        id: Opaque identifier, unique within a question set.
        prompt: Question text shown to the user (wire key ``question``).
        answer_kind: Free text or multiple choice (wire key ``answerType``).
        options: Ordered choices, only for multiple choice questions.
    """
    id: str = Field(description="Stable question identifier")
    prompt: str = Field(alias="question", description="Question text")
    answer_kind: AnswerKind = Field(
        default=AnswerKind.FREE_TEXT,
        alias="answerType",
        description="Expected answer kind"
    )
    options: tuple[str, ...] = Field(default=(), description="Choices for multiple choice")

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        """Numeric ids from the service become strings (JSON object keys)."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("answer_kind", mode="before")
    @classmethod
    def parse_answer_kind(cls, v: Any) -> AnswerKind:
        """Anything other than multiple_choice is free text."""
        return AnswerKind.from_wire(v)

    @field_validator("options", mode="before")
    @classmethod
    def default_options(cls, v: Any) -> Any:
        """A missing options list is an empty one."""
        return () if v is None else v

    @model_validator(mode="after")
    def check_options(self) -> "Question":
        """Multiple choice needs a non-empty list of unique options."""
        if self.answer_kind is AnswerKind.MULTIPLE_CHOICE:
            if not self.options:
                raise ValueError(f"multiple choice question {self.id!r} has no options")
            if len(set(self.options)) != len(self.options):
                raise ValueError(f"multiple choice question {self.id!r} has duplicate options")
        return self

    @property
    def is_multiple_choice(self) -> bool:
        """Whether the question is answered by picking an option."""
        return self.answer_kind is AnswerKind.MULTIPLE_CHOICE


class QuestionSet(BaseModel):
    """
    The ordered questions of one survey.

    Order defines traversal order and never changes once fetched.
    """
    questions: tuple[Question, ...] = Field(default=(), description="Questions in display order")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_unique_ids(self) -> "QuestionSet":
        """Question ids must be unique within the set."""
        if len(set(self.ids)) != len(self.ids):
            raise ValueError("question ids must be unique")
        return self

    def __len__(self) -> int:
        return len(self.questions)

    def __getitem__(self, index: int) -> Question:
        return self.questions[index]

    @property
    def ids(self) -> list[str]:
        """Question ids in traversal order."""
        return [q.id for q in self.questions]

    @property
    def last_index(self) -> int:
        """Index of the last question (-1 for an empty set)."""
        return len(self.questions) - 1
