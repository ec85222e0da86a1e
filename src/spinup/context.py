"""
spinup.context

Process-wide provisioning context.

Responsibilities:
- Build, once at startup, every collaborator the provisioning workflow needs
  (JWT keys, port allocator + reservation table, renderer, launcher, metadata
  store, optional DNS client).
- Hand them around explicitly instead of through module-level globals.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from spinup.auth.jwt import JwtConfig, load_jwt_config
from spinup.db.store import MetadataStore
from spinup.provisioning.compose import ComposeRenderer
from spinup.provisioning.dns import DnsClient
from spinup.provisioning.launcher import ComposeCliEngine, ContainerEngine, ContainerLauncher
from spinup.provisioning.ports import PortAllocator, PortProbe, PortReservations, tcp_probe
from spinup.settings import Settings


@dataclass(frozen=True, slots=True)
class ProvisioningContext:
    settings: Settings
    jwt: JwtConfig
    allocator: PortAllocator
    renderer: ComposeRenderer
    launcher: ContainerLauncher
    store: MetadataStore
    dns: DnsClient | None = None

    async def aclose(self) -> None:
        if self.dns is not None:
            await self.dns.aclose()


def build_context(
    settings: Settings,
    *,
    engine: ContainerEngine | None = None,
    probe: PortProbe | None = None,
    jwt: JwtConfig | None = None,
    dns_http: httpx.AsyncClient | None = None,
) -> ProvisioningContext:
    """
    Keyword overrides exist for tests and alternative engines; production
    passes only `settings`.
    """

    reservations = PortReservations(ttl=settings.port_reservation_ttl)
    allocator = PortAllocator(
        start=settings.port_range_start,
        end=settings.port_range_end,
        reservations=reservations,
        probe=probe or tcp_probe(timeout=settings.port_probe_timeout),
    )
    engine = engine or ComposeCliEngine(
        engine_binary=settings.engine_binary,
        compose_binary=settings.compose_binary,
        timeout=settings.command_timeout,
    )

    dns: DnsClient | None = None
    if settings.dns_enabled:
        dns = DnsClient(
            http=dns_http
            or httpx.AsyncClient(base_url=settings.cf_api_base_url, timeout=10.0),
            api_token=settings.cf_authorization_token,
            zone_id=settings.cf_zone_id,
            target_address=settings.dns_target_address,
        )

    return ProvisioningContext(
        settings=settings,
        jwt=jwt or load_jwt_config(settings),
        allocator=allocator,
        renderer=ComposeRenderer(
            project_dir=settings.project_dir,
            tunnel_secret=settings.tunnel_secret,
            template_dir=settings.template_dir,
        ),
        launcher=ContainerLauncher(engine),
        store=MetadataStore(project_dir=settings.project_dir),
        dns=dns,
    )
