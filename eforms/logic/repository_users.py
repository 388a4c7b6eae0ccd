"""User and bearer-token data access for the reference backend."""

from __future__ import annotations

import logging
import os
import secrets
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import bcrypt
from sqlalchemy import text as sql_text
from sqlalchemy.exc import IntegrityError

from eforms.db.base import get_engine

logger = logging.getLogger(__name__)

# bcrypt only reads the first 72 bytes of a secret
_BCRYPT_MAX_BYTES = 72


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


def _bcrypt_rounds() -> int:
    return int(os.getenv("EFORMS_BCRYPT_ROUNDS", "12"))


def _secret(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_secret(password), bcrypt.gensalt(rounds=_bcrypt_rounds())).decode("ascii")


def verify_password(password: str, stored: str) -> bool:
    try:
        return bcrypt.checkpw(_secret(password), stored.encode("ascii"))
    except ValueError:
        logger.warning("password_hash_unreadable")
        return False


def create_user(first_name: str, middle_name: str, last_name: str, email: str, password: str) -> bool:
    """Insert a user; return False when the email is already registered."""
    eng = get_engine()
    try:
        with eng.begin() as conn:
            conn.execute(
                sql_text(
                    """
                    INSERT INTO users (email, first_name, middle_name, last_name, password_hash, status, created_at)
                    VALUES (:email, :first, :middle, :last, :pw, 'active', :created_at)
                    """
                ),
                {
                    "email": email.strip().lower(),
                    "first": first_name,
                    "middle": middle_name or "",
                    "last": last_name,
                    "pw": hash_password(password),
                    "created_at": _now(),
                },
            )
    except IntegrityError:
        logger.info("user_register_duplicate email=%s", email)
        return False
    return True


def _full_name(row: Any) -> str:
    parts = [row["first_name"], row["middle_name"], row["last_name"]]
    return " ".join(p for p in parts if p)


def authenticate(email: str, password: str) -> Optional[Dict[str, str]]:
    """Return user info when the credentials match, else None."""
    eng = get_engine()
    with eng.connect() as conn:
        row = conn.execute(
            sql_text("SELECT * FROM users WHERE email = :email"),
            {"email": email.strip().lower()},
        ).mappings().fetchone()
    if row is None or not verify_password(password, row["password_hash"]):
        return None
    return {"email": row["email"], "status": row["status"], "full_name": _full_name(row)}


def issue_token(email: str) -> str:
    token = secrets.token_urlsafe(32)
    eng = get_engine()
    with eng.begin() as conn:
        conn.execute(
            sql_text("INSERT INTO auth_tokens (token, email, created_at) VALUES (:t, :e, :at)"),
            {"t": token, "e": email, "at": _now()},
        )
    return token


def email_for_token(token: str) -> Optional[str]:
    if not token:
        return None
    eng = get_engine()
    with eng.connect() as conn:
        row = conn.execute(
            sql_text("SELECT email FROM auth_tokens WHERE token = :t"),
            {"t": token},
        ).fetchone()
    return str(row[0]) if row else None


__all__ = ["create_user", "authenticate", "issue_token", "email_for_token", "hash_password", "verify_password"]
