"""Anonymous response submission endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from eforms.logic.repository_forms import get_form
from eforms.logic.repository_responses import insert_response
from eforms.models.answers import ResponseSubmission

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/responses", status_code=201, summary="Submit one respondent's answers")
def submit(payload: ResponseSubmission):
    form = get_form(payload.form_id)
    if form is None:
        raise HTTPException(status_code=404, detail="Form not found")
    known = {q["id"] for q in form["questions"]}
    unknown = [a.question_id for a in payload.answers if a.question_id not in known]
    if unknown:
        logger.info("response_rejected form_id=%s unknown_questions=%s", payload.form_id, unknown)
        raise HTTPException(status_code=422, detail=f"Unknown question ids: {', '.join(unknown)}")
    stored = insert_response(payload.form_id, [a.model_dump(mode="json") for a in payload.answers])
    return {"id": stored["id"], "message": "Response submitted"}


__all__ = ["router"]
