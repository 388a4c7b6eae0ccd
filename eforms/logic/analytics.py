"""View-side analytics aggregation.

Turns `(FormSchema, AnalyticsPayload)` into chart-ready cards, one per
question in schema order:

- choice types: the backend's `(option, count)` pairs
- rating: a 1..5 histogram plus the mean rounded half-up to one decimal
- text and date: every raw answer, verbatim, in submission order

A form with zero responses yields an empty report with no cards. Nothing is
cached: `AnalyticsView.load()` refetches on every call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import ValidationError as PydanticValidationError

from eforms.client.api import BackendClient
from eforms.errors import NetworkError
from eforms.logic.navigation import DASHBOARD_PATH, Navigator
from eforms.logic.notifications import Notifier
from eforms.models.analytics import AnalyticsPayload, OptionCount, QuestionAnalytics
from eforms.models.form import FormSchema, Question
from eforms.models.question_kind import RATING_SCALE, QuestionType

logger = logging.getLogger(__name__)


class Aggregation(str, Enum):
    CHOICE_COUNTS = "choice_counts"
    RATING = "rating"
    RAW_LIST = "raw_list"


def classify(kind: QuestionType) -> Aggregation:
    match QuestionType(kind):
        case QuestionType.MULTIPLE_CHOICE | QuestionType.CHECKBOXES | QuestionType.DROPDOWN:
            return Aggregation.CHOICE_COUNTS
        case QuestionType.RATING:
            return Aggregation.RATING
        case QuestionType.SHORT_TEXT | QuestionType.LONG_TEXT | QuestionType.DATE:
            return Aggregation.RAW_LIST
        case _:
            raise ValueError(f"unhandled question type: {kind}")


def _valid_ratings(responses: List[Any]) -> List[int]:
    ratings: List[int] = []
    for r in responses or []:
        if isinstance(r, bool) or not isinstance(r, int) or r not in RATING_SCALE:
            logger.warning("rating_value_dropped value=%r", r)
            continue
        ratings.append(r)
    return ratings


def rating_histogram(responses: List[Any]) -> Dict[int, int]:
    histogram = {score: 0 for score in RATING_SCALE}
    for r in _valid_ratings(responses):
        histogram[r] += 1
    return histogram


def rating_average(responses: List[Any]) -> float:
    ratings = _valid_ratings(responses)
    if not ratings:
        return 0
    mean = Decimal(sum(ratings)) / Decimal(len(ratings))
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


@dataclass
class ChoiceCard:
    question_id: str
    title: str
    type: QuestionType
    counts: List[Tuple[str, int]] = field(default_factory=list)

    kind = Aggregation.CHOICE_COUNTS

    @property
    def total(self) -> int:
        return sum(c for _, c in self.counts)

    def shares(self) -> List[Tuple[str, float]]:
        """Each option's fraction of all counted selections."""
        total = self.total
        return [(o, (c / total) if total else 0.0) for o, c in self.counts]

    def chart_series(self) -> List[Dict[str, Any]]:
        return [{"name": o, "value": c} for o, c in self.counts]


@dataclass
class RatingCard:
    question_id: str
    title: str
    responses: List[int] = field(default_factory=list)
    type: QuestionType = QuestionType.RATING

    kind = Aggregation.RATING

    @property
    def histogram(self) -> Dict[int, int]:
        return rating_histogram(self.responses)

    @property
    def average(self) -> float:
        return rating_average(self.responses)

    def chart_series(self) -> List[Dict[str, Any]]:
        return [{"name": f"{score} Star", "value": count} for score, count in self.histogram.items()]


@dataclass
class TextCard:
    question_id: str
    title: str
    type: QuestionType
    responses: List[str] = field(default_factory=list)

    kind = Aggregation.RAW_LIST


AnalyticsCard = Union[ChoiceCard, RatingCard, TextCard]


@dataclass
class AnalyticsReport:
    title: str
    total_responses: int
    cards: List[AnalyticsCard] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.total_responses == 0


def _option_counts(responses: List[Any]) -> List[Tuple[str, int]]:
    counts: List[Tuple[str, int]] = []
    for r in responses or []:
        try:
            pair = OptionCount.model_validate(r)
        except PydanticValidationError:
            logger.warning("option_count_dropped value=%r", r)
            continue
        counts.append((pair.option, pair.count))
    return counts


def _build_card(question: Question, entry: Optional[QuestionAnalytics]) -> AnalyticsCard:
    responses = list(entry.responses) if entry is not None else []
    aggregation = classify(question.type)
    if aggregation is Aggregation.CHOICE_COUNTS:
        return ChoiceCard(question.id, question.title, question.type, _option_counts(responses))
    if aggregation is Aggregation.RATING:
        return RatingCard(question.id, question.title, _valid_ratings(responses))
    return TextCard(question.id, question.title, question.type, ["" if r is None else str(r) for r in responses])


def _match_entries(form: FormSchema, payload: AnalyticsPayload) -> List[Optional[QuestionAnalytics]]:
    by_id = {e.question_id: e for e in payload.questions if e.question_id}
    matched: List[Optional[QuestionAnalytics]] = []
    for position, question in enumerate(form.questions):
        entry = by_id.get(question.id)
        if entry is None and position < len(payload.questions):
            candidate = payload.questions[position]
            # Positional fallback only for entries that carry no id of their own
            if not candidate.question_id:
                entry = candidate
        matched.append(entry)
    return matched


def summarize(form: FormSchema, payload: AnalyticsPayload) -> AnalyticsReport:
    report = AnalyticsReport(title=form.title, total_responses=payload.total_responses)
    if report.is_empty:
        return report
    for question, entry in zip(form.questions, _match_entries(form, payload)):
        report.cards.append(_build_card(question, entry))
    return report


class AnalyticsView:
    def __init__(self, client: BackendClient, notifier: Notifier, navigator: Navigator, form_id: str) -> None:
        self.client = client
        self.notifier = notifier
        self.navigator = navigator
        self.form_id = form_id
        self.report: Optional[AnalyticsReport] = None

    def load(self) -> Optional[AnalyticsReport]:
        try:
            form = self.client.get_form(self.form_id)
            payload = self.client.get_analytics(self.form_id)
        except NetworkError:
            logger.warning("analytics_load_failed form_id=%s", self.form_id)
            self.notifier.error("Failed to fetch analytics")
            self.navigator.navigate(DASHBOARD_PATH)
            self.report = None
            return None
        self.report = summarize(form, payload)
        logger.info(
            "analytics_loaded form_id=%s total_responses=%s cards=%s",
            self.form_id,
            self.report.total_responses,
            len(self.report.cards),
        )
        return self.report


__all__ = [
    "Aggregation",
    "AnalyticsCard",
    "AnalyticsReport",
    "AnalyticsView",
    "ChoiceCard",
    "RatingCard",
    "TextCard",
    "classify",
    "rating_average",
    "rating_histogram",
    "summarize",
]
