"""Functional tests for CSV export and the responses view."""

from __future__ import annotations

import csv
import io

from eforms.logic.csv_export import build_responses_csv, format_submitted_at
from eforms.logic.navigation import DASHBOARD_PATH
from eforms.logic.responses_view import ResponsesView, csv_filename
from eforms.models.answers import StoredResponse
from eforms.models.form import FormSchema

FORM = FormSchema.model_validate(
    {
        "id": "f1",
        "title": "Catch report",
        "questions": [
            {"id": "q_gear", "type": "checkboxes", "title": "Gear", "options": ["A", "B", "C"]},
            {"id": "q_note", "type": "long_text", "title": "Note"},
            {"id": "q_score", "type": "rating", "title": "Score"},
        ],
    }
)


def _response(rid, answers, submitted_at="2024-05-01T08:30:00"):
    return StoredResponse.model_validate(
        {
            "id": rid,
            "form_id": "f1",
            "submitted_at": submitted_at,
            "answers": [{"question_id": k, "answer": v} for k, v in answers.items()],
        }
    )


def test_header_and_quoted_rows():
    out = build_responses_csv(FORM, [_response("r1", {"q_gear": ["A", "B"], "q_score": 4})])
    assert out == (
        '"Response ID","Submitted At","Gear","Note","Score"\n'
        '"r1","2024-05-01 08:30:00","A, B","","4"'
    )


def test_export_can_omit_header():
    out = build_responses_csv(FORM, [_response("r1", {"q_note": "ok"})], include_header=False)
    assert out == '"r1","2024-05-01 08:30:00","","ok",""'


def test_embedded_quotes_and_newlines_survive_a_round_trip():
    note = 'He said "big catch"\nsecond line, with comma'
    out = build_responses_csv(FORM, [_response("r1", {"q_note": note})])
    assert '"He said ""big catch""' in out
    rows = list(csv.reader(io.StringIO(out)))
    assert rows[1][3] == note


def test_one_row_per_response_in_given_order():
    out = build_responses_csv(FORM, [_response("r2", {}), _response("r1", {})])
    rows = list(csv.reader(io.StringIO(out)))
    assert [r[0] for r in rows[1:]] == ["r2", "r1"]
    assert not out.endswith("\n")


def test_submitted_at_formatting():
    assert format_submitted_at("2024-05-01T08:30:00Z") == "2024-05-01 08:30:00"
    assert format_submitted_at(None) == "No date"
    assert format_submitted_at("") == "No date"
    assert format_submitted_at("yesterday") == "yesterday"


def test_csv_filename_is_filesystem_safe():
    assert csv_filename("Catch report") == "Catch report-responses.csv"
    assert csv_filename("a/b:c") == "a_b_c-responses.csv"
    assert csv_filename("  ") == "form-responses.csv"


def _serve_form(backend, responses):
    backend.on("GET", "/api/forms/f1", json=FORM.model_dump(mode="json"))
    backend.on("GET", "/api/forms/f1/responses", json=[r.model_dump() for r in responses])


def test_download_without_responses_writes_nothing(mock_client, backend, notifier, navigator, tmp_path):
    _serve_form(backend, [])
    view = ResponsesView(mock_client, notifier, navigator, "f1")
    assert view.load() is True
    assert view.download_csv(tmp_path) is None
    assert list(tmp_path.iterdir()) == []
    assert notifier.last == {"level": "error", "message": "No responses to download"}


def test_download_writes_named_file(mock_client, backend, notifier, navigator, tmp_path):
    _serve_form(backend, [_response("r1", {"q_gear": ["C"], "q_note": "fine", "q_score": 5}, submitted_at=None)])
    view = ResponsesView(mock_client, notifier, navigator, "f1")
    view.load()

    assert view.rows() == [
        {
            "id": "r1",
            "submitted_at": "No date",
            "answers": [("Gear", "C"), ("Note", "fine"), ("Score", "5")],
        }
    ]
    path = view.download_csv(tmp_path)
    assert path == tmp_path / "Catch report-responses.csv"
    assert path.read_text(encoding="utf-8").splitlines()[1] == '"r1","No date","C","fine","5"'
    assert notifier.last == {"level": "success", "message": "CSV downloaded successfully"}


def test_responses_load_failure_navigates_away(mock_client, notifier, navigator):
    view = ResponsesView(mock_client, notifier, navigator, "missing")
    assert view.load() is False
    assert navigator.current == DASHBOARD_PATH
    assert notifier.last["message"] == "Failed to fetch responses"
