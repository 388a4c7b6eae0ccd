"""Settings for the e-Forms client and the reference backend.

Each setting is looked up in the environment first, then in a one-line text
file under `config/`, then in `eforms_config.json`, and finally falls back to
a local-development default. The resolved values are checked by the pydantic
models below.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator


CONFIG_DIR = Path("config")
ROOT_CONFIG = Path("eforms_config.json")
DEFAULT_SESSION_PATH = Path.home() / ".eforms" / "session.json"
logger = logging.getLogger(__name__)


def _read_config_file(rel_path: str) -> Optional[str]:
    path = CONFIG_DIR / rel_path
    try:
        if path.exists():
            return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read override %s: %s", path, e)
        return None
    return None


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key, default)


class BackendConfig(BaseModel):
    base_url: str
    api_prefix: str = "/api"
    timeout_seconds: float = Field(default=10.0, gt=0)

    @field_validator("base_url")
    @classmethod
    def base_url_must_be_http(cls, v: str) -> str:
        v = (v or "").strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("backend.base_url must be an http(s) URL")
        return v.rstrip("/")

    @field_validator("api_prefix")
    @classmethod
    def api_prefix_normalized(cls, v: str) -> str:
        v = (v or "").strip().rstrip("/")
        if v and not v.startswith("/"):
            v = "/" + v
        return v


class SessionConfig(BaseModel):
    path: Path


class DatabaseConfig(BaseModel):
    dsn: str

    @field_validator("dsn")
    @classmethod
    def dsn_must_be_non_empty(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("database.dsn must be a non-empty string")
        return v


class CsvConfig(BaseModel):
    export_include_header: bool = Field(default=True)


class AppConfig(BaseModel):
    backend: BackendConfig
    session: SessionConfig
    database: DatabaseConfig
    csv: CsvConfig


def _read_json_file(path: Path) -> dict:
    try:
        if path.exists():
            return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error("Failed to read JSON config %s: %s", path, e)
    return {}


def load_config() -> AppConfig:
    """Resolve every setting and return a validated `AppConfig`.

    Raises pydantic `ValidationError` when a resolved value is unusable
    such as a non-http backend URL or a non-positive timeout.
    """

    base = _read_json_file(ROOT_CONFIG)

    def _base(path: str, default: Optional[str] = None) -> Optional[str]:
        cur: object = base
        for key in path.split("."):
            if not isinstance(cur, dict) or key not in cur:
                return default
            cur = cur[key]
        return str(cur) if cur is not None else default

    # Backend
    base_url = _env("EFORMS_BACKEND_URL") or _read_config_file("backend.url") or _base("backend.base_url", "http://localhost:8000")
    api_prefix = _env("EFORMS_API_PREFIX") or _read_config_file("backend.api_prefix") or _base("backend.api_prefix", "/api")
    timeout_text = _env("EFORMS_HTTP_TIMEOUT") or _read_config_file("backend.timeout") or _base("backend.timeout_seconds", "10")

    # Session storage
    session_path = _env("EFORMS_SESSION_PATH") or _read_config_file("session.path") or _base("session.path") or str(DEFAULT_SESSION_PATH)

    # Reference backend database
    dsn = _env("DATABASE_URL") or _read_config_file("database.url") or _base("database.dsn") or "sqlite+pysqlite:///:memory:"

    # CSV export
    include_header_text = _env("CSV_EXPORT_INCLUDE_HEADER") or _read_config_file("csv.export.include_header") or _base("csv.export_include_header", "true")

    try:
        cfg = AppConfig(
            backend=BackendConfig(
                base_url=base_url,
                api_prefix=api_prefix,
                timeout_seconds=str(timeout_text).strip(),
            ),
            session=SessionConfig(path=Path(session_path).expanduser()),
            database=DatabaseConfig(dsn=dsn),
            csv=CsvConfig(export_include_header=str(include_header_text).strip().lower() == "true"),
        )
        return cfg
    except PydanticValidationError as e:
        logger.error("Invalid application configuration: %s", e)
        raise


__all__ = [
    "AppConfig",
    "BackendConfig",
    "SessionConfig",
    "DatabaseConfig",
    "CsvConfig",
    "load_config",
]
