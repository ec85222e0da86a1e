"""
spinup.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (JWT secret, DNS API token, tunnel secret).
- Offer a cached settings instance for the process entrypoint.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Read once at process start and treated as immutable afterwards.
    """

    model_config = SettingsConfigDict(env_prefix="SPINUP_", case_sensitive=False, frozen=True)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "spinup"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8090

    # Host layout
    project_dir: Path = Path(".")
    # one of arm64v8, arm32v7 or amd64
    architecture: str = "amd64"
    host_name: str = "localhost"

    # Port allocation
    port_range_start: int = Field(default=5432, ge=1, le=65535)
    port_range_end: int = Field(default=5440, ge=1, le=65536)
    port_probe_timeout: float = Field(default=3.0, gt=0)
    port_reservation_ttl: float = Field(default=300.0, gt=0)

    # Container engine
    engine_binary: str = "docker"
    compose_binary: str = "docker-compose"
    command_timeout: float = Field(default=120.0, gt=0)
    template_dir: Path | None = None
    tunnel_secret: str = Field(default="", repr=False)

    # Auth
    jwt_alg: str = "RS256"
    jwt_secret: str = Field(default="dev-secret-change-me", repr=False)
    jwt_private_key_path: Path | None = None
    jwt_public_key_path: Path | None = None
    jwt_issuer: str | None = None
    jwt_audience: str | None = None

    # DNS (Cloudflare)
    dns_enabled: bool = False
    cf_authorization_token: str = Field(default="", repr=False)
    cf_zone_id: str = ""
    cf_api_base_url: str = "https://api.cloudflare.com/client/v4"
    dns_target_address: str = "34.203.202.32"

    @model_validator(mode="after")
    def _check_port_range(self) -> Settings:
        if self.port_range_end <= self.port_range_start:
            raise ValueError("port_range_end must be greater than port_range_start")
        return self

    @property
    def private_key_path(self) -> Path:
        return self.jwt_private_key_path or self.project_dir / "app.rsa"

    @property
    def public_key_path(self) -> Path:
        return self.jwt_public_key_path or self.project_dir / "app.rsa.pub"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Only the process entrypoint calls `get_settings`; everything else receives the
# Settings instance (or the ProvisioningContext built from it) explicitly.
