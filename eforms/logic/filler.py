"""Form filler controller.

Drives one public form through `loading -> ready -> submitting ->
{submitted | error}`:

- `load()` fetches the public schema and seeds one answer slot per question.
- In `ready`, answer slots accept updates in any order; the last write wins.
- `submit()` checks required answers locally, then posts one
  `{question_id, answer}` pair per question in schema order. A failed post
  returns to `ready` with every answer kept; success is terminal.
- `error` means the form could not be loaded at all.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional

from eforms.client.api import BackendClient
from eforms.errors import FormValidationError, InvalidStateError, NetworkError
from eforms.logic.notifications import Notifier
from eforms.models.answers import AnswerItem, AnswerValue
from eforms.models.form import FormSchema, Question
from eforms.models.question_kind import RATING_MAX, RATING_MIDPOINT, RATING_MIN, QuestionType

logger = logging.getLogger(__name__)


class FillerState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"
    ERROR = "error"


class InputControl(str, Enum):
    TEXT_INPUT = "text_input"
    TEXTAREA = "textarea"
    RADIO_GROUP = "radio_group"
    CHECKBOX_GROUP = "checkbox_group"
    SELECT = "select"
    DATE_PICKER = "date_picker"
    RATING_SCALE = "rating_scale"


def input_control_for(kind: QuestionType) -> InputControl:
    match QuestionType(kind):
        case QuestionType.SHORT_TEXT:
            return InputControl.TEXT_INPUT
        case QuestionType.LONG_TEXT:
            return InputControl.TEXTAREA
        case QuestionType.MULTIPLE_CHOICE:
            return InputControl.RADIO_GROUP
        case QuestionType.CHECKBOXES:
            return InputControl.CHECKBOX_GROUP
        case QuestionType.DROPDOWN:
            return InputControl.SELECT
        case QuestionType.DATE:
            return InputControl.DATE_PICKER
        case QuestionType.RATING:
            return InputControl.RATING_SCALE
        case _:
            raise ValueError(f"unhandled question type: {kind}")


def initial_answer(kind: QuestionType) -> AnswerValue:
    control = input_control_for(kind)
    if control is InputControl.CHECKBOX_GROUP:
        return []
    if control is InputControl.RATING_SCALE:
        return RATING_MIDPOINT
    return ""


def is_answer_missing(answer: Any) -> bool:
    if answer is None or answer == "":
        return True
    if isinstance(answer, (list, tuple, set, frozenset)) and len(answer) == 0:
        return True
    return False


def _coerce_answer(question: Question, value: Any) -> AnswerValue:
    """Check `value` against the question's input control and normalise it."""
    control = input_control_for(question.type)
    if control is InputControl.RATING_SCALE:
        if isinstance(value, bool) or not isinstance(value, int) or not RATING_MIN <= value <= RATING_MAX:
            raise FormValidationError(f"Rating for '{question.title}' must be between {RATING_MIN} and {RATING_MAX}")
        return value
    if control is InputControl.CHECKBOX_GROUP:
        if isinstance(value, str) or not isinstance(value, (list, tuple, set, frozenset)):
            raise FormValidationError(f"Answer for '{question.title}' must be a list of options")
        selected: List[str] = []
        for item in value:
            if item not in question.options:
                raise FormValidationError(f"'{item}' is not an option of '{question.title}'")
            if item not in selected:
                selected.append(item)
        return selected
    if not isinstance(value, str):
        raise FormValidationError(f"Answer for '{question.title}' must be text")
    if control in (InputControl.RADIO_GROUP, InputControl.SELECT):
        if value and value not in question.options:
            raise FormValidationError(f"'{value}' is not an option of '{question.title}'")
    elif control is InputControl.DATE_PICKER and value:
        try:
            date.fromisoformat(value)
        except ValueError as exc:
            raise FormValidationError(f"Answer for '{question.title}' must be a date (YYYY-MM-DD)") from exc
    return value


@dataclass
class SubmitResult:
    ok: bool
    error: Optional[str] = None
    response_id: Optional[str] = None


class FormFiller:
    def __init__(self, client: BackendClient, notifier: Notifier, form_id: str) -> None:
        self.client = client
        self.notifier = notifier
        self.form_id = form_id
        self.state = FillerState.LOADING
        self.form: Optional[FormSchema] = None
        self.answers: Dict[str, AnswerValue] = {}

    def load(self) -> FillerState:
        if self.state is not FillerState.LOADING:
            raise InvalidStateError(f"cannot load form in state {self.state.value}")
        try:
            form = self.client.get_public_form(self.form_id)
        except NetworkError:
            logger.warning("filler_load_failed form_id=%s", self.form_id)
            self.notifier.error("Form not found")
            self.state = FillerState.ERROR
            return self.state
        self.form = form
        self.answers = {q.id: initial_answer(q.type) for q in form.questions}
        self.state = FillerState.READY
        logger.info("filler_ready form_id=%s questions=%s", self.form_id, len(form.questions))
        return self.state

    def _require_ready(self) -> FormSchema:
        if self.state is not FillerState.READY or self.form is None:
            raise InvalidStateError(f"form does not accept answers in state {self.state.value}")
        return self.form

    def _question(self, question_id: str) -> Question:
        form = self._require_ready()
        question = form.question_by_id(question_id)
        if question is None:
            raise FormValidationError(f"Unknown question: {question_id}")
        return question

    def set_answer(self, question_id: str, value: Any) -> None:
        question = self._question(question_id)
        self.answers[question_id] = _coerce_answer(question, value)

    def toggle_option(self, question_id: str, option: str, checked: bool) -> None:
        question = self._question(question_id)
        if question.type is not QuestionType.CHECKBOXES:
            raise FormValidationError(f"'{question.title}' does not accept multiple selections")
        current = list(self.answers.get(question_id) or [])
        if checked and option not in current:
            current.append(option)
        elif not checked:
            current = [o for o in current if o != option]
        self.answers[question_id] = _coerce_answer(question, current)

    def first_missing_required(self) -> Optional[Question]:
        form = self._require_ready()
        for question in form.questions:
            if question.required and is_answer_missing(self.answers.get(question.id)):
                return question
        return None

    def build_answers(self) -> List[AnswerItem]:
        form = self._require_ready()
        return [AnswerItem(question_id=q.id, answer=self.answers.get(q.id, initial_answer(q.type))) for q in form.questions]

    def submit(self) -> SubmitResult:
        self._require_ready()
        missing = self.first_missing_required()
        if missing is not None:
            message = f"Please answer: {missing.title}"
            self.notifier.error(message)
            return SubmitResult(ok=False, error=message)

        answers = self.build_answers()
        self.state = FillerState.SUBMITTING
        try:
            receipt = self.client.submit_response(self.form_id, answers)
        except NetworkError as exc:
            logger.warning("response_submit_failed form_id=%s status=%s", self.form_id, exc.status_code)
            self.state = FillerState.READY
            self.notifier.error("Failed to submit response")
            return SubmitResult(ok=False, error="Failed to submit response")
        self.state = FillerState.SUBMITTED
        logger.info("response_submitted form_id=%s response_id=%s", self.form_id, receipt.id)
        self.notifier.success("Response submitted successfully!")
        return SubmitResult(ok=True, response_id=receipt.id)


__all__ = [
    "FillerState",
    "InputControl",
    "FormFiller",
    "SubmitResult",
    "input_control_for",
    "initial_answer",
    "is_answer_missing",
]
