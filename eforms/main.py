"""FastAPI application factory for the e-Forms reference backend.

Serves the REST contract the client controllers consume (forms, public fill,
responses, analytics, login/register) below the `/api` prefix, backed by
SQLAlchemy. Intended for local development and the integration harness:

    uvicorn eforms.main:create_app --factory
"""

from __future__ import annotations

import logging
import os

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError

from eforms.db.base import get_engine
from eforms.db.migrations_runner import apply_migrations
from eforms.http.problem import (
    handle_http_exception,
    handle_request_validation_error,
    handle_unexpected_error,
)
from eforms.http.request_id import RequestIdMiddleware
from eforms.logging_setup import configure_logging
from eforms.middleware.cors import apply_cors
from eforms.routes import api_router

logger = logging.getLogger(__name__)

API_PREFIX = "/api"


def _auto_migrate_enabled() -> bool:
    return os.getenv("AUTO_APPLY_MIGRATIONS", "1").strip().lower() not in {"0", "false", "no"}


def _health() -> dict:
    try:
        with get_engine().connect() as conn:
            conn.exec_driver_sql("SELECT 1")
        return {"status": "ok", "db": True}
    except Exception as exc:  # pragma: no cover - depends on external DB
        logger.error("health_db_check_failed", exc_info=True)
        return {"status": "degraded", "db": False, "reason": str(exc)}


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="BFAR e-Forms reference backend")

    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
    app.add_middleware(RequestIdMiddleware)
    apply_cors(app)

    if _auto_migrate_enabled():
        applied = apply_migrations(get_engine())
        logger.info("startup_migrations applied=%s", applied)
    else:
        logger.info("AUTO_APPLY_MIGRATIONS disabled; skipping migrations at startup")

    app.include_router(api_router, prefix=API_PREFIX)

    @app.get("/health")
    def health():  # pragma: no cover - trivial
        return _health()

    return app


# Intentionally do not instantiate the app at import time to prevent side effects.
