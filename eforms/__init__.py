"""BFAR e-Forms: survey form schema, builder, filler and analytics.

Client-side controllers live in `eforms/logic/` and talk to the REST backend
through `eforms.client.BackendClient`. `create_app` builds the FastAPI
reference backend used for local development and integration tests.
"""

from __future__ import annotations

from eforms.main import create_app

__all__ = ["create_app"]
