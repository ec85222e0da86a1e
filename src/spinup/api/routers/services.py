"""
spinup.api.routers.services

Tenant-facing provisioning endpoints.

Responsibilities:
- `POST /createservice`: provision a database for the authenticated tenant.
- `GET /clusters`: list the caller's recorded clusters.
- `GET /`: greeting.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from spinup.api.deps import context_dep
from spinup.auth.deps import get_principal
from spinup.auth.models import Principal
from spinup.context import ProvisioningContext
from spinup.provisioning.models import ProvisionedService, ServiceRequest
from spinup.services.provisioning_service import ProvisioningService

router = APIRouter(tags=["services"])


@router.get("/", response_class=PlainTextResponse)
async def hello() -> str:
    return "hello !! Welcome to spinup \n"


@router.post("/createservice", response_model=ProvisionedService)
async def create_service(
    body: ServiceRequest,
    principal: Principal = Depends(get_principal),
    ctx: ProvisioningContext = Depends(context_dep),
) -> ProvisionedService:
    # ProvisioningError subclasses are turned into responses by the app-level handler.
    svc = ProvisioningService(ctx=ctx)
    return await svc.provision(subject=principal.subject, req=body)


@router.get("/clusters")
async def list_clusters(
    principal: Principal = Depends(get_principal),
    ctx: ProvisioningContext = Depends(context_dep),
) -> list[dict[str, Any]]:
    records = await ctx.store.list_clusters(principal.subject)
    return [
        {"ClusterID": r.cluster_id, "Name": r.name, "Port": r.port}
        for r in records
    ]


# --- Module Notes -----------------------------------------------------------
# Only POST is registered on /createservice, so other methods get FastAPI's 405.
