"""Database bootstrap for the e-Forms reference backend.

Exposes engine construction and the SQL migrations runner. Repositories in
`eforms/logic/` use these; no ORM models leak into route handlers.
"""

from eforms.db.base import get_engine, reset_engine
from eforms.db.migrations_runner import apply_migrations

__all__ = ["get_engine", "reset_engine", "apply_migrations"]
