"""Form builder controller.

Owns the editable `FormSchema` and exposes the authoring operations: add,
update, delete and reorder questions, manage option lists, and validate and
save through the backend. A builder created with a `form_id` is in edit mode
and updates that form; otherwise the first successful save creates the form,
binds the new id and navigates to its edit page.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from eforms.client.api import BackendClient
from eforms.errors import FormValidationError, NetworkError
from eforms.logic.navigation import DASHBOARD_PATH, Navigator, edit_path
from eforms.logic.notifications import Notifier
from eforms.logic.validation import validate_form_for_save
from eforms.models.form import FormSchema, Question, new_question_id
from eforms.models.question_kind import QuestionType

logger = logging.getLogger(__name__)

DEFAULT_OPTIONS = ("Option 1", "Option 2")
QUESTION_FIELDS = frozenset({"type", "title", "description", "required", "options"})


def shows_options(kind: QuestionType) -> bool:
    """Whether the builder exposes an option list editor for `kind`."""
    match QuestionType(kind):
        case QuestionType.MULTIPLE_CHOICE | QuestionType.CHECKBOXES | QuestionType.DROPDOWN:
            return True
        case QuestionType.SHORT_TEXT | QuestionType.LONG_TEXT | QuestionType.DATE | QuestionType.RATING:
            return False
        case _:
            raise ValueError(f"unhandled question type: {kind}")


@dataclass
class SaveResult:
    ok: bool
    form_id: Optional[str] = None
    created: bool = False
    error: Optional[str] = None


class FormBuilder:
    def __init__(
        self,
        client: BackendClient,
        notifier: Notifier,
        navigator: Navigator,
        form_id: Optional[str] = None,
        id_factory: Callable[[], str] = new_question_id,
    ) -> None:
        self.client = client
        self.notifier = notifier
        self.navigator = navigator
        self.form_id = form_id
        self._new_id = id_factory
        self.form = FormSchema(id=form_id)
        self.saving = False

    @property
    def is_edit_mode(self) -> bool:
        return self.form_id is not None

    def load(self) -> bool:
        """Fetch the bound form for editing; navigate away when it cannot be loaded."""
        if not self.is_edit_mode:
            return True
        try:
            self.form = self.client.get_form(self.form_id)
        except NetworkError:
            logger.warning("builder_load_failed form_id=%s", self.form_id)
            self.notifier.error("Failed to fetch form")
            self.navigator.navigate(DASHBOARD_PATH)
            return False
        logger.info("builder_loaded form_id=%s questions=%s", self.form_id, len(self.form.questions))
        return True

    def set_title(self, title: str) -> None:
        self.form.title = title

    def set_description(self, description: str) -> None:
        self.form.description = description

    # Questions

    def _question(self, index: int) -> Question:
        if not 0 <= index < len(self.form.questions):
            raise IndexError(f"question index out of range: {index}")
        return self.form.questions[index]

    def add_question(self) -> Question:
        question = Question(
            id=self._new_id(),
            type=QuestionType.SHORT_TEXT,
            title="",
            description="",
            required=False,
            options=[],
        )
        self.form.questions.append(question)
        return question

    def update_question(self, index: int, field: str, value: Any) -> Question:
        if field not in QUESTION_FIELDS:
            raise ValueError(f"unknown question field: {field}")
        question = self._question(index)
        if field == "type":
            new_type = QuestionType(value)
            question.type = new_type
            # Defaults only fill an empty list; existing options always survive
            if shows_options(new_type) and not question.options:
                question.options = list(DEFAULT_OPTIONS)
        elif field == "options":
            question.options = [str(o) for o in (value or [])]
        elif field == "required":
            question.required = bool(value)
        else:
            setattr(question, field, "" if value is None else str(value))
        return question

    def delete_question(self, index: int) -> Question:
        self._question(index)
        return self.form.questions.pop(index)

    def move_question(self, from_index: int, to_index: int) -> None:
        question = self.delete_question(from_index)
        to_index = max(0, min(to_index, len(self.form.questions)))
        self.form.questions.insert(to_index, question)

    # Options

    def add_option(self, question_index: int) -> None:
        self._question(question_index).options.append("")

    def update_option(self, question_index: int, option_index: int, value: str) -> None:
        options = self._question(question_index).options
        if not 0 <= option_index < len(options):
            raise IndexError(f"option index out of range: {option_index}")
        options[option_index] = value

    def delete_option(self, question_index: int, option_index: int) -> None:
        options = self._question(question_index).options
        if not 0 <= option_index < len(options):
            raise IndexError(f"option index out of range: {option_index}")
        del options[option_index]

    # Save

    def validate(self) -> None:
        validate_form_for_save(self.form)

    def to_payload(self) -> Dict[str, Any]:
        questions: List[Dict[str, Any]] = []
        for q in self.form.questions:
            questions.append(
                {
                    "id": q.id,
                    "type": q.type.value,
                    "title": q.title,
                    "description": q.description,
                    "required": q.required,
                    "options": list(q.options) if shows_options(q.type) else [],
                }
            )
        return {
            "title": self.form.title,
            "description": self.form.description,
            "questions": questions,
        }

    def validate_and_save(self) -> SaveResult:
        try:
            self.validate()
        except FormValidationError as exc:
            self.notifier.error(str(exc))
            return SaveResult(ok=False, form_id=self.form_id, error=str(exc))

        payload = self.to_payload()
        self.saving = True
        try:
            if self.is_edit_mode:
                self.client.update_form(self.form_id, payload)
                logger.info("form_updated form_id=%s", self.form_id)
                self.notifier.success("Form updated successfully!")
                return SaveResult(ok=True, form_id=self.form_id)

            created = self.client.create_form(payload)
            if not created.id:
                raise NetworkError("backend created a form without an id")
            self.form_id = created.id
            self.form.id = created.id
            logger.info("form_created form_id=%s", created.id)
            self.notifier.success("Form created successfully!")
            self.navigator.navigate(edit_path(created.id))
            return SaveResult(ok=True, form_id=created.id, created=True)
        except NetworkError as exc:
            message = exc.detail or "Failed to save form"
            logger.warning("form_save_failed form_id=%s status=%s", self.form_id, exc.status_code)
            self.notifier.error(message)
            return SaveResult(ok=False, form_id=self.form_id, error=message)
        finally:
            self.saving = False


__all__ = ["FormBuilder", "SaveResult", "shows_options", "DEFAULT_OPTIONS"]
