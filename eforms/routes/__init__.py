"""APIRouter registration for the e-Forms reference backend."""

from __future__ import annotations

from fastapi import APIRouter

from eforms.routes.auth import router as auth_router
from eforms.routes.forms import router as forms_router
from eforms.routes.responses import router as responses_router

api_router = APIRouter()
api_router.include_router(auth_router, tags=["Auth"])
api_router.include_router(forms_router, tags=["Forms", "Analytics"])
api_router.include_router(responses_router, tags=["Responses"])

__all__ = ["api_router"]
