"""User notification sink.

Controllers report outcomes through a `Notifier`. The default implementation
logs each notification and keeps it in an in-memory buffer so callers (and
tests) can show or inspect the latest messages.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Protocol

logger = logging.getLogger(__name__)

SUCCESS = "success"
ERROR = "error"


class Notifier(Protocol):
    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class LoggingNotifier:
    def __init__(self) -> None:
        self.messages: List[Dict[str, str]] = []

    def success(self, message: str) -> None:
        logger.info("notify_success message=%s", message)
        self.messages.append({"level": SUCCESS, "message": message})

    def error(self, message: str) -> None:
        logger.warning("notify_error message=%s", message)
        self.messages.append({"level": ERROR, "message": message})

    @property
    def last(self) -> Dict[str, str] | None:
        return self.messages[-1] if self.messages else None

    def drain(self) -> List[Dict[str, str]]:
        """Return buffered notifications and clear the buffer."""
        out = list(self.messages)
        self.messages.clear()
        return out


__all__ = ["Notifier", "LoggingNotifier", "SUCCESS", "ERROR"]
