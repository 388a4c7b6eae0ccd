"""Pydantic models for response submissions and stored responses."""

from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, Field


# str for text/date/single-choice, int for rating, list for checkboxes
AnswerValue = Union[int, str, List[str]]


class AnswerItem(BaseModel):
    question_id: str = Field(..., min_length=1)
    answer: AnswerValue


class ResponseSubmission(BaseModel):
    form_id: str = Field(..., min_length=1)
    answers: List[AnswerItem] = Field(default_factory=list)


class SubmissionReceipt(BaseModel):
    id: str
    message: str = "Response submitted"


class StoredResponse(BaseModel):
    id: str
    form_id: str
    submitted_at: Optional[str] = None
    answers: List[AnswerItem] = Field(default_factory=list)

    def answer_for(self, question_id: str) -> Optional[AnswerItem]:
        for item in self.answers:
            if item.question_id == question_id:
                return item
        return None


__all__ = [
    "AnswerValue",
    "AnswerItem",
    "ResponseSubmission",
    "SubmissionReceipt",
    "StoredResponse",
]
