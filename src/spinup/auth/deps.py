"""
spinup.auth.deps

FastAPI dependency functions for authentication.

Responsibilities:
- Convert an `Authorization: Bearer <token>` header into a typed `Principal`.
"""

from __future__ import annotations

from fastapi import Depends, Header, HTTPException
from starlette.status import HTTP_401_UNAUTHORIZED

from spinup.api.deps import context_dep
from spinup.auth.jwt import JwtValidationError, subject_from_header
from spinup.auth.models import Principal
from spinup.context import ProvisioningContext
from spinup.observability.logging import get_logger

log = get_logger(__name__)


def get_principal(
    authorization: str | None = Header(default=None),
    ctx: ProvisioningContext = Depends(context_dep),
) -> Principal:
    if not authorization:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Missing bearer token")

    try:
        subject = subject_from_header(cfg=ctx.jwt, auth_header=authorization)
    except JwtValidationError as e:
        log.info("token_rejected", error=str(e))
        raise HTTPException(
            status_code=HTTP_401_UNAUTHORIZED, detail="error validating token"
        ) from e

    return Principal(subject=subject)


# --- Module Notes -----------------------------------------------------------
# The token subject is the tenant id; request bodies are checked against it in
# `services.provisioning_service`.
