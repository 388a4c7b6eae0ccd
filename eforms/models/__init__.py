"""Shared data models for forms, answers, analytics and auth."""

from eforms.models.question_kind import CHOICE_TYPES, QuestionType, is_choice_type
from eforms.models.form import FormSchema, Question
from eforms.models.answers import AnswerItem, ResponseSubmission, StoredResponse

__all__ = [
    "CHOICE_TYPES",
    "QuestionType",
    "is_choice_type",
    "FormSchema",
    "Question",
    "AnswerItem",
    "ResponseSubmission",
    "StoredResponse",
]
