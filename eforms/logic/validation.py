"""Save-time validation for a form schema.

Rules are checked in order and the first violation is raised:

- the form title is non-blank
- at least one question exists
- every question has a non-blank title
- every choice-type question has at least 2 options, none of them blank
"""

from __future__ import annotations

from eforms.errors import FormValidationError
from eforms.models.form import FormSchema, Question
from eforms.models.question_kind import is_choice_type

MIN_CHOICE_OPTIONS = 2


def _has_valid_options(question: Question) -> bool:
    opts = question.options or []
    if len(opts) < MIN_CHOICE_OPTIONS:
        return False
    return all(isinstance(o, str) and o.strip() for o in opts)


def validate_form_for_save(form: FormSchema) -> None:
    if not (form.title or "").strip():
        raise FormValidationError("Please enter a form title")
    if not form.questions:
        raise FormValidationError("Please add at least one question")
    for number, question in enumerate(form.questions, start=1):
        if not (question.title or "").strip():
            raise FormValidationError(f"Question {number} is missing a title")
        if is_choice_type(question.type) and not _has_valid_options(question):
            raise FormValidationError(f"Question {number} needs at least 2 valid options")


__all__ = ["validate_form_for_save", "MIN_CHOICE_OPTIONS"]
