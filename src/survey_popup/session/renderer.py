"""
Question renderer - projects a session state onto a presentation model.

``render_view`` is a pure function of the state snapshot and the question
set. It never touches the session; shells call it after every action and
draw whatever it returns.

Example Usage:
    >>> from survey_popup.session.renderer import render_view
    >>>
    >>> view = render_view(session.state, session.questions)
    >>> view.title
    'User Survey'
"""
from __future__ import annotations

import logging
from typing import Optional, Union

from pydantic import BaseModel, Field

from ..models.question import Question, QuestionSet
from ..models.session_state import FailureReason, SessionState, SessionStatus

__all__ = [
    "ViewAction",
    "ChoiceOption",
    "ChoiceControl",
    "FreeTextControl",
    "QuestionPanel",
    "PopupView",
    "render_view",
]

logger = logging.getLogger(__name__)


TEXT_PLACEHOLDER = "Type your answer here..."
TEXT_ROWS = 4


class ViewAction(BaseModel):
    """A button the shell should offer."""
    name: str = Field(description="Action identifier (start, next, previous, reset, retry)")
    label: str = Field(description="Button label")
    enabled: bool = Field(default=True, description="Whether the button is clickable")


class ChoiceOption(BaseModel):
    """One option of a choice group."""
    value: str = Field(description="Option text, also the answer value")
    selected: bool = Field(default=False, description="Matches the current draft")


class ChoiceControl(BaseModel):
    """Mutually exclusive option group for multiple choice questions."""
    kind: str = Field(default="choice", description="Control discriminator")
    options: list[ChoiceOption] = Field(default_factory=list, description="Options in order")

    @property
    def selected_value(self) -> Optional[str]:
        """Value of the selected option, if any."""
        for option in self.options:
            if option.selected:
                return option.value
        return None


class FreeTextControl(BaseModel):
    """Single multi-line text field."""
    kind: str = Field(default="text", description="Control discriminator")
    value: str = Field(default="", description="Current draft")
    placeholder: str = Field(default=TEXT_PLACEHOLDER, description="Placeholder text")
    rows: int = Field(default=TEXT_ROWS, description="Visible text rows")


class QuestionPanel(BaseModel):
    """
    The current question while the survey is in progress.

    Attributes:
        question_id: Id of the question at the cursor.
        prompt: Question text.
        index: Zero-based cursor.
        total: Number of questions.
        progress: Completed fraction, (cursor + 1) / total.
        progress_text: "Question n of N".
        control: Input affordance for the answer kind.
        is_last: Whether confirming submits the survey.
    """
    question_id: str
    prompt: str
    index: int = Field(ge=0)
    total: int = Field(ge=1)
    progress: float = Field(ge=0.0, le=1.0)
    progress_text: str
    control: Union[ChoiceControl, FreeTextControl]
    is_last: bool = False


class PopupView(BaseModel):
    """
    Everything a shell needs to draw the popup.

    Attributes:
        status: State the view was rendered from.
        title: Heading.
        message: Body text.
        icon: Decorative icon.
        busy: Whether to show a spinner.
        actions: Buttons to offer, in display order.
        question: Current question (IN_PROGRESS only).
        failure: Why the session failed (FAILED only).
    """
    status: SessionStatus
    title: str = ""
    message: str = ""
    icon: str = ""
    busy: bool = False
    actions: list[ViewAction] = Field(default_factory=list)
    question: Optional[QuestionPanel] = None
    failure: Optional[FailureReason] = None

    def action(self, name: str) -> Optional[ViewAction]:
        """Find an action by name."""
        for action in self.actions:
            if action.name == name:
                return action
        return None

    def is_enabled(self, name: str) -> bool:
        """Whether the named action is offered and enabled."""
        action = self.action(name)
        return action is not None and action.enabled


def _render_control(question: Question, draft: str) -> Union[ChoiceControl, FreeTextControl]:
    if question.is_multiple_choice:
        return ChoiceControl(
            options=[ChoiceOption(value=o, selected=o == draft) for o in question.options]
        )
    return FreeTextControl(value=draft)


def _render_question(state: SessionState, questions: QuestionSet) -> PopupView:
    total = len(questions)
    question = questions[state.cursor]
    is_last = state.cursor == questions.last_index

    panel = QuestionPanel(
        question_id=question.id,
        prompt=question.prompt,
        index=state.cursor,
        total=total,
        progress=(state.cursor + 1) / total,
        progress_text=f"Question {state.cursor + 1} of {total}",
        control=_render_control(question, state.draft),
        is_last=is_last,
    )
    return PopupView(
        status=state.status,
        title=question.prompt,
        actions=[
            ViewAction(name="previous", label="Previous", enabled=state.can_go_previous),
            ViewAction(
                name="next",
                label="Submit Survey" if is_last else "Next",
                enabled=state.can_go_next,
            ),
        ],
        question=panel,
    )


def render_view(state: SessionState, questions: Optional[QuestionSet]) -> PopupView:
    """
    Project a session state onto the popup's presentation model.

    Args:
        state: Current session snapshot.
        questions: Loaded question set (None before a successful load).

    Returns:
        The PopupView to draw.
    """
    status = state.status

    if status is SessionStatus.LOADING:
        return PopupView(status=status, title="Loading", message="Loading survey...", busy=True)

    if status is SessionStatus.BLOCKED:
        return PopupView(
            status=status,
            title="Survey Not Available",
            message="No surveys are supported for this page.",
            icon="🚫",
        )

    if status is SessionStatus.WELCOME:
        count = len(questions) if questions is not None else 0
        return PopupView(
            status=status,
            title="User Survey",
            message=f"Help us improve by answering {count} quick questions.",
            icon="📋",
            actions=[ViewAction(name="start", label="Start Survey", enabled=count > 0)],
        )

    if status is SessionStatus.IN_PROGRESS:
        if questions is None:
            raise ValueError("cannot render a survey in progress without questions")
        return _render_question(state, questions)

    if status is SessionStatus.SUBMITTING:
        return PopupView(
            status=status,
            title="Submitting",
            message="Submitting your responses...",
            busy=True,
        )

    if status is SessionStatus.SUCCESS:
        return PopupView(
            status=status,
            title="Thank You!",
            message="Your survey responses have been submitted successfully.",
            icon="✅",
            actions=[ViewAction(name="reset", label="Take Survey Again")],
        )

    # FAILED
    return PopupView(
        status=status,
        title="Something went wrong",
        message=state.error_message or "",
        icon="❌",
        failure=state.failure,
        actions=[ViewAction(name="retry", label="Try Again")],
    )
