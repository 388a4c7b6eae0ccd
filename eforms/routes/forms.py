"""Form authoring, public fill, responses listing and analytics endpoints."""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from eforms.errors import FormValidationError
from eforms.logic.aggregation import build_analytics
from eforms.logic.repository_forms import create_form, get_form, update_form
from eforms.logic.repository_responses import list_responses
from eforms.logic.validation import validate_form_for_save
from eforms.models.form import FormSchema
from eforms.models.question_kind import is_choice_type
from eforms.routes.auth import current_user_email

router = APIRouter()
logger = logging.getLogger(__name__)


def _checked_questions(payload: FormSchema) -> list[Dict[str, Any]]:
    try:
        validate_form_for_save(payload)
    except FormValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    ids = [q.id for q in payload.questions]
    if len(set(ids)) != len(ids):
        raise HTTPException(status_code=422, detail="Question ids must be unique")
    questions = []
    for q in payload.questions:
        data = q.model_dump(mode="json")
        if not is_choice_type(q.type):
            data["options"] = []
        questions.append(data)
    return questions


def _owned_form_or_404(form_id: str, email: str) -> Dict[str, Any]:
    form = get_form(form_id, owner_email=email)
    if form is None:
        raise HTTPException(status_code=404, detail="Form not found")
    return form


@router.post("/forms", status_code=201, summary="Create a form")
def create(payload: FormSchema, email: str = Depends(current_user_email)):
    questions = _checked_questions(payload)
    return create_form(email, payload.title, payload.description, questions)


@router.get("/forms/public/{form_id}", summary="Fetch a form for filling (no auth)")
def get_public(form_id: str):
    form = get_form(form_id)
    if form is None:
        raise HTTPException(status_code=404, detail="Form not found")
    return form


@router.get("/forms/analytics/{form_id}", summary="Aggregated answers per question")
def get_analytics(form_id: str, email: str = Depends(current_user_email)):
    form = _owned_form_or_404(form_id, email)
    analytics = build_analytics(form, list_responses(form_id))
    logger.info("analytics_built form_id=%s total_responses=%s", form_id, analytics["total_responses"])
    return analytics


@router.get("/forms/{form_id}/responses", summary="List raw responses in submission order")
def get_responses(form_id: str, email: str = Depends(current_user_email)):
    _owned_form_or_404(form_id, email)
    return list_responses(form_id)


@router.get("/forms/{form_id}", summary="Fetch a form for editing")
def get_one(form_id: str, email: str = Depends(current_user_email)):
    return _owned_form_or_404(form_id, email)


@router.put("/forms/{form_id}", summary="Replace a form's title, description and questions")
def update(form_id: str, payload: FormSchema, email: str = Depends(current_user_email)):
    _owned_form_or_404(form_id, email)
    questions = _checked_questions(payload)
    update_form(form_id, payload.title, payload.description, questions)
    logger.info("form_replaced form_id=%s questions=%s", form_id, len(questions))
    return get_form(form_id)


__all__ = ["router"]
