"""RFC4180 CSV export of collected responses.

One row per response with columns `Response ID`, `Submitted At` and one
column per question title in schema order. Every field is quoted; checkbox
answers are joined with ", " and a question without an answer renders as an
empty cell.
"""

from __future__ import annotations

import csv
import io
import logging
from datetime import datetime
from typing import Iterable, List, Optional

from eforms.models.answers import StoredResponse
from eforms.models.form import FormSchema

logger = logging.getLogger(__name__)

FIXED_HEADER = ["Response ID", "Submitted At"]
NO_DATE = "No date"
MULTI_VALUE_SEPARATOR = ", "


def format_submitted_at(value: Optional[str]) -> str:
    if not value:
        return NO_DATE
    try:
        # fromisoformat rejects a trailing Z before Python 3.11
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.warning("submitted_at_unparseable value=%s", value)
        return value
    return parsed.strftime("%Y-%m-%d %H:%M:%S")


def answer_display(response: StoredResponse, question_id: str) -> str:
    item = response.answer_for(question_id)
    if item is None:
        return ""
    if isinstance(item.answer, list):
        return MULTI_VALUE_SEPARATOR.join(str(a) for a in item.answer)
    return str(item.answer)


def build_header(form: FormSchema) -> List[str]:
    return FIXED_HEADER + [q.title for q in form.questions]


def build_row(form: FormSchema, response: StoredResponse) -> List[str]:
    row = [response.id, format_submitted_at(response.submitted_at)]
    row.extend(answer_display(response, q.id) for q in form.questions)
    return row


def build_responses_csv(
    form: FormSchema,
    responses: Iterable[StoredResponse],
    *,
    include_header: bool = True,
) -> str:
    buf = io.StringIO(newline="")
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    if include_header:
        writer.writerow(build_header(form))
    count = 0
    for response in responses:
        writer.writerow(build_row(form, response))
        count += 1
    logger.info("responses_csv_built form_id=%s rows=%s", form.id, count)
    # No trailing newline after the last row
    return buf.getvalue().rstrip("\n")


__all__ = [
    "build_responses_csv",
    "build_header",
    "build_row",
    "answer_display",
    "format_submitted_at",
    "FIXED_HEADER",
    "NO_DATE",
]
