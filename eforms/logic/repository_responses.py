"""Response data access helpers.

Responses are append-only: a submission is stored once and never edited.
Listing returns them in submission order.
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy import text as sql_text

from eforms.db.base import get_engine

logger = logging.getLogger(__name__)


def insert_response(form_id: str, answers: List[Dict[str, Any]]) -> Dict[str, Any]:
    response_id = str(uuid.uuid4())
    submitted_at = datetime.now(timezone.utc).isoformat(timespec="microseconds").replace("+00:00", "Z")
    eng = get_engine()
    with eng.begin() as conn:
        conn.execute(
            sql_text(
                """
                INSERT INTO responses (response_id, form_id, answers_json, submitted_at)
                VALUES (:rid, :fid, :ajson, :at)
                """
            ),
            {"rid": response_id, "fid": form_id, "ajson": json.dumps(answers), "at": submitted_at},
        )
    logger.info("response_inserted form_id=%s response_id=%s", form_id, response_id)
    return {"id": response_id, "form_id": form_id, "submitted_at": submitted_at, "answers": answers}


def list_responses(form_id: str) -> List[Dict[str, Any]]:
    eng = get_engine()
    with eng.connect() as conn:
        rows = conn.execute(
            sql_text(
                """
                SELECT response_id, form_id, answers_json, submitted_at
                FROM responses
                WHERE form_id = :fid
                ORDER BY submitted_at ASC, response_id ASC
                """
            ),
            {"fid": form_id},
        ).mappings().all()
    return [
        {
            "id": r["response_id"],
            "form_id": r["form_id"],
            "submitted_at": r["submitted_at"],
            "answers": json.loads(r["answers_json"] or "[]"),
        }
        for r in rows
    ]


__all__ = ["insert_response", "list_responses"]
