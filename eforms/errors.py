"""Error taxonomy shared by the client-side controllers.

- `FormValidationError`: local, raised before any network call.
- `NetworkError`: transport failure or an error status from the backend.
- `NotFoundError`: the backend answered 404 for the requested form.
- `InvalidStateError`: an operation was invoked in a state that rejects it.
"""

from __future__ import annotations

from typing import Optional


class FormValidationError(ValueError):
    pass


class NetworkError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None, detail: Optional[str] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        # Human-readable message from the backend problem body, when present
        self.detail = detail


class NotFoundError(NetworkError):
    pass


class InvalidStateError(RuntimeError):
    pass


__all__ = [
    "FormValidationError",
    "NetworkError",
    "NotFoundError",
    "InvalidStateError",
]
