"""
spinup.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Expose the ProvisioningContext built at startup (stored on app.state).
"""

from __future__ import annotations

from fastapi import Request

from spinup.context import ProvisioningContext


def context_dep(request: Request) -> ProvisioningContext:
    # The context is created once in `spinup.api.app.create_app`.
    return request.app.state.context  # type: ignore[attr-defined]
