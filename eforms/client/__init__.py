"""REST backend client and session handling."""

from eforms.client.api import BackendClient
from eforms.client.session import Session, SessionStore

__all__ = ["BackendClient", "Session", "SessionStore"]
