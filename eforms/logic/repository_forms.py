"""Form data access helpers.

Questions are stored as a JSON document per form; order inside the document
is the display and export order.
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import text as sql_text

from eforms.db.base import get_engine

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


def _row_to_form(row: Any) -> Dict[str, Any]:
    return {
        "id": row["form_id"],
        "title": row["title"],
        "description": row["description"] or "",
        "questions": json.loads(row["questions_json"] or "[]"),
    }


def create_form(owner_email: str, title: str, description: str, questions: List[Dict[str, Any]]) -> Dict[str, Any]:
    form_id = str(uuid.uuid4())
    now = _now()
    eng = get_engine()
    with eng.begin() as conn:
        conn.execute(
            sql_text(
                """
                INSERT INTO forms (form_id, owner_email, title, description, questions_json, created_at, updated_at)
                VALUES (:fid, :owner, :title, :descr, :qjson, :now, :now)
                """
            ),
            {
                "fid": form_id,
                "owner": owner_email,
                "title": title,
                "descr": description or "",
                "qjson": json.dumps(questions),
                "now": now,
            },
        )
    logger.info("form_inserted form_id=%s owner=%s questions=%s", form_id, owner_email, len(questions))
    return {"id": form_id, "title": title, "description": description or "", "questions": questions}


def get_form(form_id: str, owner_email: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """Return the form, or None when missing or not owned by `owner_email`."""
    eng = get_engine()
    with eng.connect() as conn:
        row = conn.execute(
            sql_text("SELECT * FROM forms WHERE form_id = :fid"),
            {"fid": form_id},
        ).mappings().fetchone()
    if row is None:
        return None
    if owner_email is not None and row["owner_email"] != owner_email:
        return None
    return _row_to_form(row)


def update_form(form_id: str, title: str, description: str, questions: List[Dict[str, Any]]) -> bool:
    eng = get_engine()
    with eng.begin() as conn:
        result = conn.execute(
            sql_text(
                """
                UPDATE forms
                SET title = :title, description = :descr, questions_json = :qjson, updated_at = :now
                WHERE form_id = :fid
                """
            ),
            {
                "fid": form_id,
                "title": title,
                "descr": description or "",
                "qjson": json.dumps(questions),
                "now": _now(),
            },
        )
    return (result.rowcount or 0) > 0


__all__ = ["create_form", "get_form", "update_form"]
