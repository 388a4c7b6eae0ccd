"""Navigation seam between controllers and the routing shell."""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol

logger = logging.getLogger(__name__)

DASHBOARD_PATH = "/dashboard"


def edit_path(form_id: str) -> str:
    return f"/forms/{form_id}/edit"


class Navigator(Protocol):
    def navigate(self, path: str) -> None: ...


class HistoryNavigator:
    """Records visited paths; `current` is the latest one."""

    def __init__(self, start: Optional[str] = None) -> None:
        self.history: List[str] = [start] if start else []

    def navigate(self, path: str) -> None:
        logger.info("navigate path=%s", path)
        self.history.append(path)

    @property
    def current(self) -> Optional[str]:
        return self.history[-1] if self.history else None


__all__ = ["Navigator", "HistoryNavigator", "DASHBOARD_PATH", "edit_path"]
