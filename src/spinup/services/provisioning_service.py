"""
spinup.services.provisioning_service

Provisioning workflow (the orchestrator).

Responsibilities:
- Validate a request against the authenticated tenant and supported engines.
- Allocate a port, render the compose file, launch it, optionally publish DNS,
  and record the cluster in the tenant store.
- Track and log each state transition; surface every failure to the caller.

Failures are terminal for the request and never retried. Side effects from
earlier states (rendered directory, running container) are not rolled back.

Known limitation: two provisions of the same engine for the same tenant share
`<project_dir>/<userid>/<name>` and its compose project. The second overwrites
the first compose file and recreates the container on a new port, so the port
in the first metadata record goes stale.
"""

from __future__ import annotations

import enum

import structlog

from spinup.context import ProvisioningContext
from spinup.observability.logging import get_logger
from spinup.provisioning.errors import AuthorizationError, ProvisioningError, ValidationError
from spinup.provisioning.models import (
    SUPPORTED_ENGINES,
    ClusterRecord,
    ProvisionedService,
    ServiceRequest,
    ServiceSpec,
)

log = get_logger(__name__)


class ProvisionState(enum.StrEnum):
    validating = "VALIDATING"
    allocating = "ALLOCATING"
    rendering = "RENDERING"
    launching = "LAUNCHING"
    connecting = "CONNECTING"
    persisting = "PERSISTING"
    completed = "COMPLETED"
    failed = "FAILED"


class ProvisioningService:
    def __init__(self, *, ctx: ProvisioningContext) -> None:
        self._ctx = ctx
        self.state = ProvisionState.validating
        self.history: list[ProvisionState] = [ProvisionState.validating]

    def _enter(self, state: ProvisionState) -> None:
        self.state = state
        self.history.append(state)
        log.info("provision_state", state=state.value)

    async def provision(self, *, subject: str, req: ServiceRequest) -> ProvisionedService:
        with structlog.contextvars.bound_contextvars(tenant=req.userid, cluster=req.name):
            try:
                return await self._run(subject=subject, req=req)
            except ProvisioningError as e:
                failed_in = self.state
                self._enter(ProvisionState.failed)
                log.warning(
                    "provision_failed",
                    failed_in=failed_in.value,
                    error_type=type(e).__name__,
                    error=e.message,
                )
                raise

    async def _run(self, *, subject: str, req: ServiceRequest) -> ProvisionedService:
        settings = self._ctx.settings

        if req.userid != subject:
            raise AuthorizationError(
                f"user {req.userid} trying to access /createservice using jwt userId {subject}"
            )
        if req.name not in SUPPORTED_ENGINES:
            raise ValidationError(f"currently we don't support {req.name}")

        self._enter(ProvisionState.allocating)
        port = await self._ctx.allocator.allocate()

        try:
            spec = ServiceSpec.from_request(req, architecture=settings.architecture, port=port)
            service_dir = settings.project_dir / req.userid / req.name

            self._enter(ProvisionState.rendering)
            self._ctx.renderer.render(spec, service_dir)

            self._enter(ProvisionState.launching)
            container_id = await self._ctx.launcher.launch(service_dir)
        finally:
            # Past LAUNCHING the container owns the port, or the request failed.
            self._ctx.allocator.release(port)

        if self._ctx.dns is not None:
            self._enter(ProvisionState.connecting)
            await self._ctx.dns.create_a_record(user_id=req.userid, service_name=req.name)

        self._enter(ProvisionState.persisting)
        await self._ctx.store.record(
            req.userid, ClusterRecord(cluster_id=container_id, name=req.name, port=port)
        )

        self._enter(ProvisionState.completed)
        log.info("service_created", port=port, container_id=container_id)
        return ProvisionedService(
            host_name=settings.host_name,
            port=port,
            container_id=container_id,
        )


# --- Module Notes -----------------------------------------------------------
# One ProvisioningService instance serves exactly one request; shared state lives
# in the ProvisioningContext collaborators (reservation table, store locks).
