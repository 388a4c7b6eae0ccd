"""Pydantic models for the login/register contract.

The login response is pinned to the `access_token` variant; `refreshToken`
and `expiresIn` keep their camelCase wire names through aliases.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class RegisterRequest(BaseModel):
    first_name: str = Field(..., min_length=1)
    middle_name: str = ""
    last_name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)


class UserInfo(BaseModel):
    email: str
    status: str = "active"
    full_name: str = ""


class LoginResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(..., min_length=1)
    refresh_token: Optional[str] = Field(default=None, alias="refreshToken")
    expires_in: Optional[int] = Field(default=None, alias="expiresIn")
    user: UserInfo


__all__ = ["LoginRequest", "RegisterRequest", "UserInfo", "LoginResponse"]
