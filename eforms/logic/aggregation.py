"""Server-side analytics aggregation for the reference backend.

Produces the `/forms/analytics/{id}` body: `total_responses` plus, per
question in schema order, `responses` shaped by type:

- choice types: `[{option, count}]` in option order; every checkbox
  selection counts once, and answers naming an unknown option are appended
  after the schema options
- everything else: raw answers in submission order
"""

from __future__ import annotations

from typing import Any, Dict, List

from eforms.models.question_kind import CHOICE_TYPES, QuestionType


def _answers_by_question(responses: List[Dict[str, Any]]) -> Dict[str, List[Any]]:
    out: Dict[str, List[Any]] = {}
    for response in responses:
        for item in response.get("answers") or []:
            qid = item.get("question_id")
            if qid:
                out.setdefault(qid, []).append(item.get("answer"))
    return out


def _count_options(options: List[str], answers: List[Any]) -> List[Dict[str, Any]]:
    counts: Dict[str, int] = {opt: 0 for opt in options}
    for answer in answers:
        selected = answer if isinstance(answer, list) else [answer]
        for choice in selected:
            if choice is None or choice == "":
                continue
            counts[str(choice)] = counts.get(str(choice), 0) + 1
    return [{"option": opt, "count": n} for opt, n in counts.items()]


def build_analytics(form: Dict[str, Any], responses: List[Dict[str, Any]]) -> Dict[str, Any]:
    grouped = _answers_by_question(responses)
    questions: List[Dict[str, Any]] = []
    for q in form.get("questions") or []:
        qid = q.get("id")
        kind = QuestionType(q.get("type"))
        answers = grouped.get(qid, [])
        if kind in CHOICE_TYPES:
            data: List[Any] = _count_options(list(q.get("options") or []), answers)
        else:
            data = [a for a in answers if a is not None]
        questions.append({"question_id": qid, "type": kind.value, "title": q.get("title", ""), "responses": data})
    return {"total_responses": len(responses), "questions": questions}


__all__ = ["build_analytics"]
