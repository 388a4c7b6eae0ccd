"""QuestionType enumeration for the seven supported question kinds.

The set is closed: the builder, filler and analytics modules each dispatch on
these tags and must handle every member.
"""

from __future__ import annotations

from enum import Enum


class QuestionType(str, Enum):
    SHORT_TEXT = "short_text"
    LONG_TEXT = "long_text"
    MULTIPLE_CHOICE = "multiple_choice"
    CHECKBOXES = "checkboxes"
    DROPDOWN = "dropdown"
    DATE = "date"
    RATING = "rating"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    QuestionType.SHORT_TEXT: "Short Text",
    QuestionType.LONG_TEXT: "Long Text",
    QuestionType.MULTIPLE_CHOICE: "Multiple Choice",
    QuestionType.CHECKBOXES: "Checkboxes",
    QuestionType.DROPDOWN: "Dropdown",
    QuestionType.DATE: "Date",
    QuestionType.RATING: "Rating Scale (1-5)",
}

# Menu order used by the builder type selector
QUESTION_TYPE_CHOICES: list[tuple[str, str]] = [(t.value, t.label) for t in QuestionType]

CHOICE_TYPES = frozenset(
    {QuestionType.MULTIPLE_CHOICE, QuestionType.CHECKBOXES, QuestionType.DROPDOWN}
)

RATING_MIN = 1
RATING_MAX = 5
RATING_SCALE = tuple(range(RATING_MIN, RATING_MAX + 1))
RATING_MIDPOINT = 3


def is_choice_type(kind: QuestionType | str) -> bool:
    return QuestionType(kind) in CHOICE_TYPES


__all__ = [
    "QuestionType",
    "QUESTION_TYPE_CHOICES",
    "CHOICE_TYPES",
    "RATING_MIN",
    "RATING_MAX",
    "RATING_SCALE",
    "RATING_MIDPOINT",
    "is_choice_type",
]
