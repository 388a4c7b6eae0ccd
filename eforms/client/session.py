"""Authenticated session and its on-disk store.

A `Session` is passed explicitly to `BackendClient`; nothing reads it from
module state. `SessionStore` keeps the token and cached user info between
runs in a small JSON file.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from eforms.config import AppConfig
from eforms.models.auth import LoginResponse, UserInfo

logger = logging.getLogger(__name__)


class Session(BaseModel):
    access_token: str = Field(..., min_length=1)
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    user: UserInfo

    @classmethod
    def from_login(cls, login: LoginResponse) -> "Session":
        return cls(
            access_token=login.access_token,
            refresh_token=login.refresh_token,
            expires_in=login.expires_in,
            user=UserInfo(
                email=login.user.email,
                status=login.user.status,
                full_name=login.user.full_name,
            ),
        )

    def auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}"}


class SessionStore:
    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    @classmethod
    def from_config(cls, config: AppConfig) -> "SessionStore":
        return cls(config.session.path)

    def save(self, session: Session) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(session.model_dump_json(indent=2), encoding="utf-8")
        os.replace(tmp_path, self.path)
        logger.info("session_saved email=%s", session.user.email)

    def load(self) -> Optional[Session]:
        """Return the stored session, or None when absent or unreadable.

        An unreadable file is removed so the next login starts clean.
        """
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return Session.model_validate(data)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, PydanticValidationError):
            logger.error("session_parse_failed path=%s", str(self.path), exc_info=True)
            self.clear()
            return None

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            return
        logger.info("session_cleared path=%s", str(self.path))


__all__ = ["Session", "SessionStore"]
