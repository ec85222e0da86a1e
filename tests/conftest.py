"""
tests.conftest

Shared fixtures and fakes.

Responsibilities:
- Test settings rooted in a temporary project directory (HS256 auth).
- A scriptable fake container engine and port probe.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from spinup.auth.jwt import JwtConfig, issue_token, load_jwt_config
from spinup.context import ProvisioningContext, build_context
from spinup.provisioning.errors import (
    ComposeValidationError,
    IdentifierLookupError,
    LaunchError,
    PreflightError,
)
from spinup.provisioning.ports import ProbeResult
from spinup.settings import Settings


class FakeEngine:
    def __init__(
        self,
        *,
        available: bool = True,
        fail_validate: bool = False,
        fail_up: bool = False,
        container_id: str = "3f2a9c1b7d6e",
    ) -> None:
        self.available = available
        self.fail_validate = fail_validate
        self.fail_up = fail_up
        self.container_id = container_id
        self.calls: list[tuple[str, Any]] = []

    def check_available(self) -> None:
        self.calls.append(("check_available", None))
        if not self.available:
            raise PreflightError("docker-compose doesn't exist on PATH")

    async def validate(self, compose_file: Path) -> None:
        self.calls.append(("validate", compose_file))
        if self.fail_validate:
            raise ComposeValidationError("bad compose file")

    async def up(self, compose_file: Path) -> None:
        self.calls.append(("up", compose_file))
        if self.fail_up:
            raise LaunchError("compose up exited with 1: port is already allocated")

    async def last_container_id(self) -> str:
        self.calls.append(("last_container_id", None))
        if not self.container_id:
            raise IdentifierLookupError("no container id")
        return self.container_id

    @property
    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]


class FakeProbe:
    """
    Port probe answering from a table; ports not listed are refused.
    """

    def __init__(self, results: dict[int, ProbeResult] | None = None) -> None:
        self.results = results or {}
        self.probed: list[int] = []

    async def __call__(self, port: int) -> ProbeResult:
        self.probed.append(port)
        return self.results.get(port, ProbeResult.REFUSED)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        env="test",
        project_dir=tmp_path / "spinup",
        architecture="amd64",
        jwt_alg="HS256",
        jwt_secret="test-secret-0123456789abcdef0123456789",
    )


@pytest.fixture
def jwt_cfg(settings: Settings) -> JwtConfig:
    return load_jwt_config(settings)


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def probe() -> FakeProbe:
    return FakeProbe()


@pytest.fixture
def ctx(settings: Settings, engine: FakeEngine, probe: FakeProbe) -> ProvisioningContext:
    return build_context(settings, engine=engine, probe=probe)


@pytest.fixture
def token_for(jwt_cfg: JwtConfig):
    def _issue(subject: str) -> str:
        return issue_token(cfg=jwt_cfg, subject=subject)

    return _issue


def scenario_body(**overrides: Any) -> dict[str, Any]:
    body: dict[str, Any] = {
        "name": "postgres",
        "duration": 200,
        "resource": {"memory": "32MB", "storage": 200, "version": {"maj": 9, "min": 6}},
        "userid": "u1",
    }
    body.update(overrides)
    return body
