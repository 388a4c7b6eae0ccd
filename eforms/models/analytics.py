"""Wire models for the analytics endpoint.

`responses` depends on the question type: `{option, count}` pairs for the
choice types, raw numeric or string answers for everything else.
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, Field

from eforms.models.question_kind import QuestionType


class OptionCount(BaseModel):
    option: str
    count: int = Field(default=0, ge=0)


class QuestionAnalytics(BaseModel):
    question_id: Optional[str] = None
    type: QuestionType
    title: str = ""
    responses: List[Any] = Field(default_factory=list)


class AnalyticsPayload(BaseModel):
    total_responses: int = Field(default=0, ge=0)
    questions: List[QuestionAnalytics] = Field(default_factory=list)


__all__ = ["OptionCount", "QuestionAnalytics", "AnalyticsPayload"]
