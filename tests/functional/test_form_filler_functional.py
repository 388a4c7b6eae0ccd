"""Functional tests for the form filler state machine."""

from __future__ import annotations

import copy
import json

import httpx
import pytest

from eforms.errors import FormValidationError, InvalidStateError
from eforms.logic.filler import FillerState, FormFiller, is_answer_missing

FORM = {
    "id": "f1",
    "title": "Fisheries survey",
    "description": "",
    "questions": [
        {"id": "q_name", "type": "short_text", "title": "Name", "required": True, "options": []},
        {"id": "q_gear", "type": "checkboxes", "title": "Gear used", "required": True, "options": ["Net", "Line", "Trap"]},
        {"id": "q_boat", "type": "dropdown", "title": "Boat", "required": False, "options": ["Banca", "Trawler"]},
        {"id": "q_score", "type": "rating", "title": "Catch this season", "required": True, "options": []},
        {"id": "q_date", "type": "date", "title": "Last trip", "required": False, "options": []},
        {"id": "q_notes", "type": "long_text", "title": "Notes", "required": False, "options": []},
    ],
}


@pytest.fixture()
def filler(mock_client, backend, notifier) -> FormFiller:
    backend.on("GET", "/api/forms/public/f1", json=copy.deepcopy(FORM))
    f = FormFiller(mock_client, notifier, "f1")
    assert f.load() is FillerState.READY
    return f


def test_load_seeds_one_slot_per_question(filler):
    assert filler.answers == {
        "q_name": "",
        "q_gear": [],
        "q_boat": "",
        "q_score": 3,
        "q_date": "",
        "q_notes": "",
    }


def test_load_of_missing_form_ends_in_error(mock_client, notifier):
    f = FormFiller(mock_client, notifier, "gone")
    assert f.load() is FillerState.ERROR
    assert f.form is None
    assert notifier.last == {"level": "error", "message": "Form not found"}
    with pytest.raises(InvalidStateError):
        f.set_answer("q_name", "x")


def test_updates_are_last_write_wins(filler):
    filler.set_answer("q_notes", "first")
    filler.set_answer("q_boat", "Banca")
    filler.set_answer("q_notes", "second")
    assert filler.answers["q_notes"] == "second"
    assert filler.answers["q_boat"] == "Banca"


def test_toggle_option_has_set_semantics(filler):
    filler.toggle_option("q_gear", "Net", True)
    filler.toggle_option("q_gear", "Line", True)
    filler.toggle_option("q_gear", "Net", True)
    assert filler.answers["q_gear"] == ["Net", "Line"]
    filler.toggle_option("q_gear", "Net", False)
    assert filler.answers["q_gear"] == ["Line"]


@pytest.mark.parametrize(
    "question_id, value",
    [
        ("q_score", 0),
        ("q_score", 6),
        ("q_score", True),
        ("q_score", "5"),
        ("q_boat", "Canoe"),
        ("q_gear", ["Net", "Spear"]),
        ("q_gear", "Net"),
        ("q_date", "tomorrow"),
        ("q_name", 42),
        ("q_unknown", "x"),
    ],
)
def test_invalid_answers_are_rejected_without_change(filler, question_id, value):
    before = dict(filler.answers)
    with pytest.raises(FormValidationError):
        filler.set_answer(question_id, value)
    assert filler.answers == before


def test_toggle_on_non_checkbox_question_is_rejected(filler):
    with pytest.raises(FormValidationError):
        filler.toggle_option("q_boat", "Banca", True)


def test_missing_answer_predicate():
    assert is_answer_missing("")
    assert is_answer_missing([])
    assert is_answer_missing(None)
    assert not is_answer_missing(" ")
    assert not is_answer_missing(3)
    assert not is_answer_missing(["Net"])


def test_submit_rejected_for_first_unmet_required_question(filler, backend, notifier):
    filler.set_answer("q_notes", "draft")
    before = copy.deepcopy(filler.answers)
    result = filler.submit()
    assert result.ok is False
    assert result.error == "Please answer: Name"
    assert notifier.last == {"level": "error", "message": "Please answer: Name"}
    assert filler.state is FillerState.READY
    assert filler.answers == before
    assert backend.calls("POST", "/api/responses") == []

    filler.set_answer("q_name", "Ana")
    assert filler.submit().error == "Please answer: Gear used"


def test_default_rating_counts_as_answered(filler, backend):
    backend.on("POST", "/api/responses", status=201, json={"id": "r1"})
    filler.set_answer("q_name", "Ana")
    filler.toggle_option("q_gear", "Trap", True)
    assert filler.submit().ok is True


def test_successful_submit_packages_answers_in_schema_order(filler, backend, notifier):
    backend.on("POST", "/api/responses", status=201, json={"id": "r1", "message": "Response submitted"})
    filler.set_answer("q_date", "2024-05-01")
    filler.set_answer("q_score", 5)
    filler.toggle_option("q_gear", "Line", True)
    filler.set_answer("q_name", "Ana")

    result = filler.submit()

    assert result.ok is True and result.response_id == "r1"
    assert filler.state is FillerState.SUBMITTED
    assert notifier.last == {"level": "success", "message": "Response submitted successfully!"}
    body = json.loads(backend.calls("POST", "/api/responses")[0].content)
    assert body["form_id"] == "f1"
    assert body["answers"] == [
        {"question_id": "q_name", "answer": "Ana"},
        {"question_id": "q_gear", "answer": ["Line"]},
        {"question_id": "q_boat", "answer": ""},
        {"question_id": "q_score", "answer": 5},
        {"question_id": "q_date", "answer": "2024-05-01"},
        {"question_id": "q_notes", "answer": ""},
    ]


def test_submitted_state_is_terminal(filler, backend):
    backend.on("POST", "/api/responses", status=201, json={"id": "r1"})
    filler.set_answer("q_name", "Ana")
    filler.toggle_option("q_gear", "Net", True)
    filler.submit()
    with pytest.raises(InvalidStateError):
        filler.set_answer("q_name", "Ben")
    with pytest.raises(InvalidStateError):
        filler.submit()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"status": 500, "json": {"title": "Internal Server Error", "status": 500}},
        {"exc": httpx.ReadTimeout("timed out")},
    ],
)
def test_failed_submit_returns_to_ready_and_keeps_answers(filler, backend, notifier, kwargs):
    backend.on("POST", "/api/responses", **kwargs)
    filler.set_answer("q_name", "Ana")
    filler.toggle_option("q_gear", "Net", True)
    before = copy.deepcopy(filler.answers)

    result = filler.submit()

    assert result.ok is False
    assert filler.state is FillerState.READY
    assert filler.answers == before
    assert notifier.last == {"level": "error", "message": "Failed to submit response"}

    # Manual retry succeeds once the backend recovers
    backend.on("POST", "/api/responses", status=201, json={"id": "r2"})
    assert filler.submit().ok is True
    assert filler.state is FillerState.SUBMITTED
