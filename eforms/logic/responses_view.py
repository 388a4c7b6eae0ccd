"""Responses listing and CSV download for one form."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Optional

from eforms.client.api import BackendClient
from eforms.config import AppConfig
from eforms.errors import NetworkError
from eforms.logic.csv_export import answer_display, build_responses_csv, format_submitted_at
from eforms.logic.navigation import DASHBOARD_PATH, Navigator
from eforms.logic.notifications import Notifier
from eforms.models.answers import StoredResponse
from eforms.models.form import FormSchema

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|]+')


def csv_filename(form_title: str) -> str:
    stem = _UNSAFE_FILENAME_CHARS.sub("_", form_title).strip() or "form"
    return f"{stem}-responses.csv"


class ResponsesView:
    def __init__(
        self,
        client: BackendClient,
        notifier: Notifier,
        navigator: Navigator,
        form_id: str,
        *,
        include_header: bool = True,
    ) -> None:
        self.client = client
        self.notifier = notifier
        self.navigator = navigator
        self.form_id = form_id
        self.include_header = include_header
        self.form: Optional[FormSchema] = None
        self.responses: List[StoredResponse] = []

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        client: BackendClient,
        notifier: Notifier,
        navigator: Navigator,
        form_id: str,
    ) -> "ResponsesView":
        return cls(client, notifier, navigator, form_id, include_header=config.csv.export_include_header)

    def load(self) -> bool:
        try:
            form = self.client.get_form(self.form_id)
            responses = self.client.list_responses(self.form_id)
        except NetworkError:
            logger.warning("responses_load_failed form_id=%s", self.form_id)
            self.notifier.error("Failed to fetch responses")
            self.navigator.navigate(DASHBOARD_PATH)
            return False
        self.form = form
        self.responses = responses
        return True

    def rows(self) -> List[dict]:
        """Per response: id, formatted submission time and answers by question title."""
        if self.form is None:
            return []
        out = []
        for response in self.responses:
            out.append(
                {
                    "id": response.id,
                    "submitted_at": format_submitted_at(response.submitted_at),
                    "answers": [(q.title, answer_display(response, q.id)) for q in self.form.questions],
                }
            )
        return out

    def download_csv(self, directory: Path | str) -> Optional[Path]:
        if self.form is None or not self.responses:
            self.notifier.error("No responses to download")
            return None
        content = build_responses_csv(self.form, self.responses, include_header=self.include_header)
        target = Path(directory) / csv_filename(self.form.title)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        logger.info("responses_csv_written form_id=%s path=%s", self.form_id, str(target))
        self.notifier.success("CSV downloaded successfully")
        return target


__all__ = ["ResponsesView", "csv_filename"]
