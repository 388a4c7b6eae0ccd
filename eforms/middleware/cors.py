"""CORS configuration for the reference backend.

Browser front ends on another origin call the API with a bearer token, so
credentials are allowed and the request-id header is exposed.
"""

from __future__ import annotations

import os
from typing import Iterable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware


EXPOSE_HEADERS: list[str] = ["X-Request-Id"]


def _origins_from_env() -> list[str]:
    raw = os.environ.get("EFORMS_CORS_ORIGINS", "")
    return [o.strip() for o in raw.split(",") if o.strip()]


def apply_cors(app: FastAPI, *, origins: Iterable[str] | None = None) -> None:
    allowed = list(origins or _origins_from_env() or ["*"])
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed,
        # Wildcard origins cannot be combined with credentials
        allow_credentials=allowed != ["*"],
        allow_methods=["GET", "POST", "PUT"],
        allow_headers=["Authorization", "Content-Type", "X-Request-Id"],
        expose_headers=EXPOSE_HEADERS,
    )


__all__ = ["apply_cors", "EXPOSE_HEADERS"]
