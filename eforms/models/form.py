"""Pydantic models for the form schema.

A `FormSchema` is an ordered list of `Question` objects plus a form-level
title and description. The same models describe the wire shape used by the
`/forms` endpoints, so the builder, filler and analytics views and the
reference backend all share one definition.
"""

from __future__ import annotations

import uuid
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from eforms.models.question_kind import QuestionType


def new_question_id() -> str:
    """Return a fresh question identifier; identifiers are never reused."""
    return f"q_{uuid.uuid4().hex}"


class Question(BaseModel):
    id: str = Field(default_factory=new_question_id, min_length=1)
    type: QuestionType = QuestionType.SHORT_TEXT
    title: str = ""
    description: str = ""
    required: bool = False
    options: List[str] = Field(default_factory=list)

    @field_validator("description", mode="before")
    @classmethod
    def _none_description_to_empty(cls, v):
        # Stored forms may carry null for an unset description
        return "" if v is None else v

    @field_validator("options", mode="before")
    @classmethod
    def _none_options_to_empty(cls, v):
        return [] if v is None else v


class FormSchema(BaseModel):
    id: Optional[str] = None
    title: str = ""
    description: str = ""
    questions: List[Question] = Field(default_factory=list)

    @field_validator("description", mode="before")
    @classmethod
    def _none_description_to_empty(cls, v):
        return "" if v is None else v

    def question_by_id(self, question_id: str) -> Optional[Question]:
        for q in self.questions:
            if q.id == question_id:
                return q
        return None


__all__ = ["Question", "FormSchema", "new_question_id"]
