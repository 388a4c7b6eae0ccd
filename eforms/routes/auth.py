"""Login/register endpoints and the bearer-token dependency."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Header, HTTPException

from eforms.logic.repository_users import authenticate, create_user, email_for_token, issue_token
from eforms.models.auth import LoginRequest, LoginResponse, RegisterRequest, UserInfo

router = APIRouter()
logger = logging.getLogger(__name__)

# Tokens never expire in the reference backend; expiresIn is advisory only
TOKEN_TTL_SECONDS = 3600


def current_user_email(authorization: str | None = Header(default=None)) -> str:
    """Resolve `Authorization: Bearer <token>` to the owning user's email."""
    scheme, _, token = (authorization or "").partition(" ")
    email = email_for_token(token.strip()) if scheme.lower() == "bearer" else None
    if not email:
        raise HTTPException(status_code=401, detail="Not authenticated", headers={"WWW-Authenticate": "Bearer"})
    return email


@router.post("/auth/register", status_code=201, summary="Register an account")
def register(payload: RegisterRequest):
    if not create_user(payload.first_name, payload.middle_name, payload.last_name, payload.email, payload.password):
        raise HTTPException(status_code=409, detail="Email already registered")
    logger.info("user_registered email=%s", payload.email)
    return {"message": "Registration successful", "email": payload.email.strip().lower()}


@router.post("/auth/login", summary="Exchange credentials for a bearer token")
def login(payload: LoginRequest):
    user = authenticate(payload.email, payload.password)
    if user is None:
        logger.info("login_rejected email=%s", payload.email)
        raise HTTPException(status_code=401, detail="Invalid email or password")
    token = issue_token(user["email"])
    body = LoginResponse(
        access_token=token,
        refresh_token=issue_token(user["email"]),
        expires_in=TOKEN_TTL_SECONDS,
        user=UserInfo(**user),
    )
    return body.model_dump(by_alias=True)


__all__ = ["router", "current_user_email"]
