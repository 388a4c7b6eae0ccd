"""HTTP client for the e-Forms REST backend.

Every call is a short-lived request through one `httpx.Client`. Failures are
translated into the client error taxonomy:

- 404 -> `NotFoundError`
- any other status >= 400, transport errors and malformed bodies -> `NetworkError`

The authenticated `Session` is injected by the caller (or set by `login`);
it is never read from module state.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from eforms.client.session import Session
from eforms.config import AppConfig
from eforms.errors import NetworkError, NotFoundError
from eforms.models.analytics import AnalyticsPayload
from eforms.models.answers import AnswerItem, ResponseSubmission, StoredResponse, SubmissionReceipt
from eforms.models.auth import LoginResponse
from eforms.models.form import FormSchema

logger = logging.getLogger(__name__)

_RESPONSES_ADAPTER = TypeAdapter(List[StoredResponse])


def _problem_detail(resp: httpx.Response) -> Optional[str]:
    try:
        body = resp.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        detail = body.get("detail")
        if isinstance(detail, str) and detail:
            return detail
        title = body.get("title")
        if isinstance(title, str) and title:
            return title
    return None


class BackendClient:
    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        *,
        api_prefix: str = "/api",
        timeout: float = 10.0,
        session: Optional[Session] = None,
        http: Optional[httpx.Client] = None,
    ) -> None:
        self.api_prefix = api_prefix.rstrip("/")
        self.session = session
        self._owns_http = http is None
        self._http = http or httpx.Client(base_url=base_url, timeout=timeout)

    @classmethod
    def from_config(cls, config: AppConfig, session: Optional[Session] = None) -> "BackendClient":
        return cls(
            config.backend.base_url,
            api_prefix=config.backend.api_prefix,
            timeout=config.backend.timeout_seconds,
            session=session,
        )

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "BackendClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _request(self, method: str, path: str, *, json: Any = None, auth: bool = True) -> Any:
        url = f"{self.api_prefix}{path}"
        headers: Dict[str, str] = {}
        if auth and self.session is not None:
            headers.update(self.session.auth_headers())
        try:
            resp = self._http.request(method, url, json=json, headers=headers)
        except httpx.HTTPError as exc:
            logger.error("backend_request_failed method=%s url=%s error=%s", method, url, exc)
            raise NetworkError(f"{method} {url} failed: {exc}") from exc

        if resp.status_code == 404:
            detail = _problem_detail(resp)
            logger.info("backend_not_found method=%s url=%s", method, url)
            raise NotFoundError(f"{method} {url} -> 404", status_code=404, detail=detail)
        if resp.status_code >= 400:
            detail = _problem_detail(resp)
            logger.warning(
                "backend_error_status method=%s url=%s status=%s detail=%s",
                method,
                url,
                resp.status_code,
                detail,
            )
            raise NetworkError(f"{method} {url} -> {resp.status_code}", status_code=resp.status_code, detail=detail)
        if resp.status_code == 204 or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise NetworkError(f"{method} {url} returned a non-JSON body") from exc

    @staticmethod
    def _parse(model, data: Any, what: str):
        try:
            return model.model_validate(data)
        except PydanticValidationError as exc:
            logger.error("backend_malformed_body what=%s", what, exc_info=True)
            raise NetworkError(f"malformed {what} from backend") from exc

    # Auth

    def login(self, email: str, password: str) -> Session:
        data = self._request("POST", "/auth/login", json={"email": email, "password": password}, auth=False)
        login = self._parse(LoginResponse, data, "login response")
        self.session = Session.from_login(login)
        logger.info("login_succeeded email=%s", self.session.user.email)
        return self.session

    def register(self, first_name: str, middle_name: str, last_name: str, email: str, password: str) -> Dict[str, Any]:
        body = {
            "first_name": first_name,
            "middle_name": middle_name or "",
            "last_name": last_name,
            "email": email,
            "password": password,
        }
        return self._request("POST", "/auth/register", json=body, auth=False) or {}

    def logout(self) -> None:
        self.session = None

    # Forms

    def get_form(self, form_id: str) -> FormSchema:
        return self._parse(FormSchema, self._request("GET", f"/forms/{form_id}"), "form")

    def get_public_form(self, form_id: str) -> FormSchema:
        data = self._request("GET", f"/forms/public/{form_id}", auth=False)
        return self._parse(FormSchema, data, "form")

    def create_form(self, payload: Dict[str, Any]) -> FormSchema:
        return self._parse(FormSchema, self._request("POST", "/forms", json=payload), "created form")

    def update_form(self, form_id: str, payload: Dict[str, Any]) -> Optional[FormSchema]:
        data = self._request("PUT", f"/forms/{form_id}", json=payload)
        if data is None:
            return None
        return self._parse(FormSchema, data, "updated form")

    # Responses and analytics

    def submit_response(self, form_id: str, answers: List[AnswerItem]) -> SubmissionReceipt:
        body = ResponseSubmission(form_id=form_id, answers=answers).model_dump()
        data = self._request("POST", "/responses", json=body, auth=False)
        return self._parse(SubmissionReceipt, data, "submission receipt")

    def list_responses(self, form_id: str) -> List[StoredResponse]:
        data = self._request("GET", f"/forms/{form_id}/responses")
        try:
            return _RESPONSES_ADAPTER.validate_python(data or [])
        except PydanticValidationError as exc:
            logger.error("backend_malformed_body what=responses", exc_info=True)
            raise NetworkError("malformed responses from backend") from exc

    def get_analytics(self, form_id: str) -> AnalyticsPayload:
        return self._parse(AnalyticsPayload, self._request("GET", f"/forms/analytics/{form_id}"), "analytics")


__all__ = ["BackendClient"]
