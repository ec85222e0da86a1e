"""
spinup.api.app

FastAPI app factory for the spinup service.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Build (or accept) the ProvisioningContext once and expose it on app.state.
- Map every per-request error onto an HTTP response; none may stop the process.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.status import HTTP_400_BAD_REQUEST

from spinup.api.routers.dev_auth import router as dev_auth_router
from spinup.api.routers.health import router as health_router
from spinup.api.routers.services import router as services_router
from spinup.context import ProvisioningContext, build_context
from spinup.observability.logging import configure_logging, get_logger
from spinup.observability.middleware import RequestContextMiddleware
from spinup.provisioning.errors import ProvisioningError
from spinup.settings import Settings

log = get_logger(__name__)


def create_app(
    *, settings: Settings, context: ProvisioningContext | None = None
) -> FastAPI:
    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        json_logs=settings.env != "dev",
    )

    app = FastAPI(
        title="spinup",
        version="0.1.0",
        docs_url="/docs",
        openapi_url="/openapi.json",
    )
    # Keys, allocator and store are created here once and passed by reference from now on.
    app.state.context = context or build_context(settings)

    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(dev_auth_router)
    app.include_router(services_router)

    @app.exception_handler(ProvisioningError)
    async def _provisioning_error(_: Request, exc: ProvisioningError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def _invalid_request(_: Request, exc: RequestValidationError) -> JSONResponse:
        message = describe_validation_errors(exc.errors())
        log.info("request_rejected", reason=message)
        return JSONResponse(status_code=HTTP_400_BAD_REQUEST, content={"detail": message})

    @app.on_event("startup")
    async def _startup() -> None:
        log.info(
            "startup",
            env=settings.env,
            project_dir=str(settings.project_dir),
            ports=f"{settings.port_range_start}-{settings.port_range_end}",
        )

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        await app.state.context.aclose()
        log.info("shutdown")

    return app


def describe_validation_errors(errors: Sequence[Any]) -> str:
    """
    Flatten pydantic/FastAPI validation errors into one human-readable sentence
    list, e.g. `Request body contains unknown field "resource.cpu"`.
    """

    messages: list[str] = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        field = ".".join(loc)
        kind = err.get("type", "")
        if kind == "json_invalid":
            msg = "Request body contains badly-formed JSON"
        elif kind == "missing" and not field:
            msg = "Request body must not be empty"
        elif kind == "extra_forbidden":
            msg = f'Request body contains unknown field "{field}"'
        elif kind == "missing":
            msg = f'Request body is missing the "{field}" field'
        elif field:
            msg = f'Request body contains an invalid value for the "{field}" field: {err.get("msg", "")}'
        else:
            msg = f"Request body is invalid: {err.get('msg', '')}"
        if msg not in messages:
            messages.append(msg)
    return "; ".join(messages) or "Request body is invalid"


# --- Module Notes -----------------------------------------------------------
# App composition stays here; provisioning logic stays in services/provisioning.
