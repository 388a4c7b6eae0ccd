"""Problem+JSON helpers and global exception handlers.

Every non-2xx response of the reference backend carries an
`application/problem+json` body with `title`, `status` and `detail`.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

PROBLEM_MEDIA_TYPE = "application/problem+json"

_TITLES = {
    400: "Bad Request",
    401: "Unauthorized",
    404: "Not Found",
    409: "Conflict",
    422: "Invalid Request",
    500: "Internal Server Error",
}

logger = logging.getLogger(__name__)


def problem(status: int, detail: str = "", *, title: Optional[str] = None, **extra: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {"title": title or _TITLES.get(status, "Error"), "status": status, "detail": detail}
    body.update(extra)
    return body


def problem_response(status: int, detail: str = "", **extra: Any) -> JSONResponse:
    return JSONResponse(problem(status, detail, **extra), status_code=status, media_type=PROBLEM_MEDIA_TYPE)


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:  # noqa: D401
    status = int(exc.status_code or 500)
    if isinstance(exc.detail, dict):
        body = {"title": _TITLES.get(status, "Error"), "status": status, **exc.detail}
    else:
        body = problem(status, str(exc.detail or ""))
    headers = {str(k): str(v) for k, v in (exc.headers or {}).items()}
    return JSONResponse(body, status_code=status, media_type=PROBLEM_MEDIA_TYPE, headers=headers or None)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:  # noqa: D401
    logger.info("request_validation_failed path=%s errors=%s", request.url.path, len(exc.errors()))
    body = problem(422, "Request validation failed", errors=[_jsonable_error(e) for e in exc.errors()])
    return JSONResponse(body, status_code=422, media_type=PROBLEM_MEDIA_TYPE)


def _jsonable_error(err: Dict[str, Any]) -> Dict[str, Any]:
    # pydantic error dicts may carry exception objects under "ctx"
    return {"loc": list(err.get("loc", ())), "msg": str(err.get("msg", "")), "type": str(err.get("type", ""))}


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:  # noqa: D401
    logger.error("unexpected_error path=%s", request.url.path, exc_info=True)
    return problem_response(500)


__all__ = [
    "PROBLEM_MEDIA_TYPE",
    "problem",
    "problem_response",
    "handle_http_exception",
    "handle_request_validation_error",
    "handle_unexpected_error",
]
