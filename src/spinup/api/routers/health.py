"""
spinup.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness probe (`/healthz`).
- Provide readiness probe (`/readyz`) backed by the container engine preflight.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from starlette.status import HTTP_503_SERVICE_UNAVAILABLE

from spinup.api.deps import context_dep
from spinup.context import ProvisioningContext
from spinup.provisioning.errors import PreflightError

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz", response_model=None)
async def readyz(
    ctx: ProvisioningContext = Depends(context_dep),
) -> dict[str, str] | JSONResponse:
    # Without docker/docker-compose on PATH every provision would fail at preflight.
    try:
        ctx.launcher.preflight()
    except PreflightError as e:
        return JSONResponse(
            status_code=HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unavailable", "detail": e.message},
        )
    return {"status": "ready"}
