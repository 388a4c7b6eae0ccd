"""Step definitions for the form lifecycle feature.

Steps drive the client controllers (`FormBuilder`, `FormFiller`,
`AnalyticsView`) exactly as an interactive shell would, through a
`BackendClient` bound to the scenario's HTTP client.
"""

from __future__ import annotations

import logging
from typing import Any, List

from behave import given, then, when

from eforms.client.api import BackendClient
from eforms.errors import NetworkError
from eforms.logic.analytics import AnalyticsView
from eforms.logic.builder import FormBuilder
from eforms.logic.filler import FillerState, FormFiller
from eforms.logic.navigation import HistoryNavigator
from eforms.logic.notifications import LoggingNotifier

logger = logging.getLogger(__name__)

AUTHOR_PASSWORD = "lifecycle-pass"


def _split(values: str) -> List[str]:
    return [v.strip() for v in values.split(",") if v.strip()]


def _client(context: Any) -> BackendClient:
    return BackendClient(http=context.http, api_prefix=context.api_prefix)


def _question_id(context: Any, title: str) -> str:
    for question in context.builder.form.questions:
        if question.title == title:
            return question.id
    raise AssertionError(f"No question titled {title!r}")


def _card(context: Any, title: str) -> Any:
    for card in context.report.cards:
        if card.title == title:
            return card
    raise AssertionError(f"No analytics card titled {title!r}")


# Author


@given('a registered author "{email}" is logged in')
def step_author_logged_in(context: Any, email: str) -> None:
    context.author = _client(context)
    try:
        context.author.register("Integration", "", "Author", email, AUTHOR_PASSWORD)
    except NetworkError as exc:
        # A live backend keeps accounts between runs
        if exc.status_code != 409:
            raise
    context.author.login(email, AUTHOR_PASSWORD)
    context.notifier = LoggingNotifier()
    context.navigator = HistoryNavigator()


@given('the author builds a form titled "{title}"')
def step_build_form(context: Any, title: str) -> None:
    context.builder = FormBuilder(context.author, context.notifier, context.navigator)
    context.builder.set_title(title)


@given('adds a required "{kind}" question "{title}" with options "{options}"')
def step_add_choice_question(context: Any, kind: str, title: str, options: str) -> None:
    step_add_question(context, kind, title)
    index = len(context.builder.form.questions) - 1
    context.builder.update_question(index, "options", _split(options))


@given('adds a required "{kind}" question "{title}"')
def step_add_question(context: Any, kind: str, title: str) -> None:
    builder = context.builder
    builder.add_question()
    index = len(builder.form.questions) - 1
    builder.update_question(index, "title", title)
    builder.update_question(index, "type", kind)
    builder.update_question(index, "required", True)


@given("the author saves the form")
@when("the author saves the form")
def step_save_form(context: Any) -> None:
    context.save_result = context.builder.validate_and_save()


@then("the save succeeds and the form has an id")
def step_save_succeeded(context: Any) -> None:
    result = context.save_result
    assert result.ok, f"save failed: {result.error}"
    assert result.created and result.form_id
    assert context.navigator.current == f"/forms/{result.form_id}/edit"


@then('the save fails with "{message}"')
def step_save_failed(context: Any, message: str) -> None:
    assert context.save_result.ok is False
    assert context.save_result.error == message
    assert context.notifier.last == {"level": "error", "message": message}


@then("no form was created")
def step_no_form_created(context: Any) -> None:
    assert context.builder.form_id is None
    assert context.navigator.history == []


@then("the public form matches the saved schema")
def step_public_matches(context: Any) -> None:
    public = _client(context).get_public_form(context.save_result.form_id)
    assert public == context.builder.form, f"{public!r} != {context.builder.form!r}"


# Respondent


@when("a respondent opens the public form")
def step_open_public_form(context: Any) -> None:
    context.filler = FormFiller(_client(context), context.notifier, context.save_result.form_id)
    assert context.filler.load() is FillerState.READY


@when("submits without answering")
@when("submits the form")
def step_submit(context: Any) -> None:
    context.submit_result = context.filler.submit()


@when('the respondent answers "{title}" with "{value}"')
def step_answer(context: Any, title: str, value: str) -> None:
    context.filler.set_answer(_question_id(context, title), value)


@then('the submission is rejected with "{message}"')
def step_submission_rejected(context: Any, message: str) -> None:
    assert context.submit_result.ok is False
    assert context.submit_result.error == message


@then('the filler is in state "{state}"')
def step_filler_state(context: Any, state: str) -> None:
    assert context.filler.state is FillerState(state), context.filler.state


@when('respondents submit ratings "{ratings}" for "{title}"')
def step_submit_ratings(context: Any, ratings: str, title: str) -> None:
    question_id = _question_id(context, title)
    for rating in _split(ratings):
        filler = FormFiller(_client(context), context.notifier, context.save_result.form_id)
        filler.load()
        filler.set_answer(question_id, int(rating))
        assert filler.submit().ok
    logger.info("ratings_submitted form_id=%s count=%s", context.save_result.form_id, len(_split(ratings)))


# Analytics


@then("the analytics report {total:d} responses")
def step_analytics_total(context: Any, total: int) -> None:
    view = AnalyticsView(context.author, context.notifier, context.navigator, context.save_result.form_id)
    context.report = view.load()
    assert context.report is not None
    assert context.report.total_responses == total


@then('the rating histogram for "{title}" is "{counts}"')
def step_rating_histogram(context: Any, title: str, counts: str) -> None:
    expected = [int(c) for c in _split(counts)]
    assert list(_card(context, title).histogram.values()) == expected


@then('the rating average for "{title}" is {average:g}')
def step_rating_average(context: Any, title: str, average: float) -> None:
    assert _card(context, title).average == average
