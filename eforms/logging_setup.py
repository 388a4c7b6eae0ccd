"""Central logging configuration for e-Forms.

One stdout handler on the root logger serves every module logger, the
reference backend's uvicorn loggers and the client. The level comes from
`EFORMS_LOG_LEVEL` (default INFO). httpx request lines are kept at WARNING so
client calls do not drown controller events.
"""
from __future__ import annotations

import logging
import os
from logging.config import dictConfig
from typing import Any, Dict, Optional

LOG_FORMAT = "%(asctime)s %(levelname)s:%(name)s:%(message)s"


def _build_config(level: str) -> Dict[str, Any]:
    handler = {"level": level, "handlers": ["console"], "propagate": False}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": {"format": LOG_FORMAT}},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "default",
                "stream": "ext://sys.stdout",
            }
        },
        "root": {"level": level, "handlers": ["console"]},
        "loggers": {
            "httpx": {**handler, "level": "WARNING"},
            "uvicorn": handler,
            "uvicorn.error": handler,
            "uvicorn.access": handler,
        },
    }


def configure_logging(level: Optional[str] = None) -> None:
    """Configure application-wide logging once.

    Returns early when the root logger already has handlers so repeated app
    construction (reloaders, test runners) never duplicates output.
    """
    root = logging.getLogger()
    if root.handlers:
        return
    resolved = (level or os.environ.get("EFORMS_LOG_LEVEL") or "INFO").upper()
    dictConfig(_build_config(resolved))


__all__ = ["configure_logging", "LOG_FORMAT"]
