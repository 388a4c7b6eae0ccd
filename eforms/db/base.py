"""SQLAlchemy engine for the reference backend.

The reference backend defaults to an in-memory SQLite database; any
SQLAlchemy URL can be supplied through the `database.dsn` setting
(`DATABASE_URL`, `config/database.url` or `eforms_config.json`). No ORM models are
defined; repositories issue SQL through `sqlalchemy.text`.
"""

from __future__ import annotations

import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from eforms.config import load_config

logger = logging.getLogger(__name__)


def _db_url() -> str:
    # DATABASE_URL, config/database.url, eforms_config.json, then in-memory SQLite
    return load_config().database.dsn


_ENGINE: Engine | None = None
_ENGINE_URL: str | None = None


def get_engine(url: str | None = None) -> Engine:
    """Return a process-wide Engine for the given URL.

    For SQLite in-memory URLs a StaticPool keeps a single connection alive so
    every request sees the same database.
    """
    global _ENGINE, _ENGINE_URL
    resolved_url = url or _db_url()

    if _ENGINE is None or _ENGINE_URL != resolved_url:
        kwargs: dict = {"future": True, "pool_pre_ping": True}
        if resolved_url.startswith("sqlite") and ":memory:" in resolved_url:
            kwargs.update({
                "poolclass": StaticPool,
                "connect_args": {"check_same_thread": False},
            })
        elif resolved_url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
        _ENGINE = create_engine(resolved_url, **kwargs)
        _ENGINE_URL = resolved_url
        logger.info("db_engine_created dialect=%s", _ENGINE.dialect.name)

    return _ENGINE


def reset_engine() -> None:
    """Dispose the cached Engine; the next `get_engine()` builds a fresh one."""
    global _ENGINE, _ENGINE_URL
    if _ENGINE is not None:
        _ENGINE.dispose()
    _ENGINE = None
    _ENGINE_URL = None


__all__ = ["get_engine", "reset_engine"]
