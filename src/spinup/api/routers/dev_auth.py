from __future__ import annotations

from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from starlette.status import HTTP_404_NOT_FOUND, HTTP_501_NOT_IMPLEMENTED

from spinup.api.deps import context_dep
from spinup.auth.jwt import JwtConfigError, issue_token
from spinup.context import ProvisioningContext

router = APIRouter(prefix="/v1/dev", tags=["dev"])


class DevTokenRequest(BaseModel):
    subject: str = Field(min_length=1, max_length=128)
    ttl_minutes: int = Field(default=60, ge=1, le=24 * 60)


class DevTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


@router.post("/token", response_model=DevTokenResponse)
async def mint_dev_token(
    body: DevTokenRequest,
    ctx: ProvisioningContext = Depends(context_dep),
) -> DevTokenResponse:
    if ctx.settings.env == "prod":
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Not found")

    try:
        token = issue_token(
            cfg=ctx.jwt,
            subject=body.subject,
            ttl=timedelta(minutes=body.ttl_minutes),
        )
    except JwtConfigError as e:
        raise HTTPException(status_code=HTTP_501_NOT_IMPLEMENTED, detail=str(e)) from e
    return DevTokenResponse(access_token=token)
