"""
spinup.provisioning.launcher

Container engine boundary.

Responsibilities:
- Define the narrow `ContainerEngine` interface the workflow depends on.
- Implement it on top of the docker / docker-compose CLIs.
- Sequence preflight -> validate -> up -> identify in `ContainerLauncher`.
"""

from __future__ import annotations

import asyncio
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from spinup.observability.logging import get_logger
from spinup.provisioning.compose import COMPOSE_FILE_NAME
from spinup.provisioning.errors import (
    ComposeValidationError,
    IdentifierLookupError,
    LaunchError,
    PreflightError,
)

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class CommandResult:
    returncode: int
    stdout: str
    stderr: str


class CommandTimeout(Exception):
    pass


class ContainerEngine(Protocol):
    def check_available(self) -> None: ...

    async def validate(self, compose_file: Path) -> None: ...

    async def up(self, compose_file: Path) -> None: ...

    async def last_container_id(self) -> str: ...


async def run_command(*argv: str, timeout: float) -> CommandResult:
    """
    Run an external command, capturing stdout and stderr separately.
    On timeout the child is killed and reaped before `CommandTimeout` is raised.
    """

    process = await asyncio.create_subprocess_exec(
        *argv,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout)
    except TimeoutError as e:
        process.kill()
        await process.wait()
        raise CommandTimeout(f"{argv[0]} timed out after {timeout}s") from e
    return CommandResult(
        returncode=process.returncode if process.returncode is not None else -1,
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
    )


class ComposeCliEngine:
    def __init__(
        self,
        *,
        engine_binary: str = "docker",
        compose_binary: str = "docker-compose",
        timeout: float = 120.0,
    ) -> None:
        self._engine = engine_binary
        self._compose = compose_binary
        self._timeout = timeout

    def check_available(self) -> None:
        if shutil.which(self._compose) is None:
            raise PreflightError(f"{self._compose} doesn't exist on PATH")
        if shutil.which(self._engine) is None:
            raise PreflightError(f"{self._engine} doesn't exist on PATH")

    async def validate(self, compose_file: Path) -> None:
        try:
            result = await run_command(
                self._compose, "-f", str(compose_file), "config", timeout=self._timeout
            )
        except (CommandTimeout, OSError) as e:
            raise LaunchError(f"validating compose file: {e}") from e
        if result.returncode != 0:
            raise ComposeValidationError(
                f"validating compose file {compose_file}: exit {result.returncode}: "
                f"{result.stderr.strip()}"
            )

    async def up(self, compose_file: Path) -> None:
        try:
            result = await run_command(
                self._compose, "-f", str(compose_file), "up", "-d", timeout=self._timeout
            )
        except (CommandTimeout, OSError) as e:
            raise LaunchError(f"starting service: {e}") from e
        if result.returncode != 0:
            log.error("compose_up_failed", returncode=result.returncode, stderr=result.stderr)
            raise LaunchError(
                f"compose up exited with {result.returncode}: {result.stderr.strip()}",
                stderr=result.stderr,
            )
        log.info("compose_up", stdout=result.stdout.strip())

    async def last_container_id(self) -> str:
        try:
            result = await run_command(
                self._engine, "ps", "--last", "1", "-q", timeout=self._timeout
            )
        except (CommandTimeout, OSError) as e:
            raise IdentifierLookupError(f"listing containers: {e}") from e
        container_id = result.stdout.strip()
        if result.returncode != 0 or not container_id:
            raise IdentifierLookupError(
                f"no container id (exit {result.returncode}): {result.stderr.strip()}"
            )
        return container_id


class ContainerLauncher:
    def __init__(self, engine: ContainerEngine) -> None:
        self._engine = engine

    def preflight(self) -> None:
        self._engine.check_available()

    async def launch(self, service_dir: Path) -> str:
        compose_file = service_dir / COMPOSE_FILE_NAME
        self.preflight()
        await self._engine.validate(compose_file)
        await self._engine.up(compose_file)
        container_id = await self._engine.last_container_id()
        log.info("container_started", container_id=container_id)
        return container_id


# --- Module Notes -----------------------------------------------------------
# `docker ps --last 1` is racy when several services start at once; the
# compose project does not expose the container id more directly via the v1 CLI.
