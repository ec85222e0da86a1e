"""
spinup.provisioning.compose

Compose document rendering.

Responsibilities:
- Render the Jinja2 compose template for one `ServiceSpec`.
- Write it to `<destination>/docker-compose.yml`, creating the directory.
"""

from __future__ import annotations

from pathlib import Path

from jinja2 import (
    BaseLoader,
    Environment,
    FileSystemLoader,
    PackageLoader,
    StrictUndefined,
    TemplateError,
)

from spinup.observability.logging import get_logger
from spinup.provisioning.errors import RenderError
from spinup.provisioning.models import ServiceSpec

log = get_logger(__name__)

TEMPLATE_FILENAME = "docker-compose.yml.j2"
COMPOSE_FILE_NAME = "docker-compose.yml"


class ComposeRenderer:
    def __init__(
        self,
        *,
        project_dir: Path,
        tunnel_secret: str = "",
        template_dir: Path | None = None,
    ) -> None:
        self._project_dir = project_dir
        self._tunnel_secret = tunnel_secret
        loader: BaseLoader
        if template_dir is not None:
            loader = FileSystemLoader(str(template_dir))
        else:
            loader = PackageLoader("spinup.provisioning", "templates")
        # StrictUndefined turns a missing substitution into an error instead of "".
        self._env = Environment(
            loader=loader,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            autoescape=False,
        )

    def context_for(self, spec: ServiceSpec) -> dict[str, object]:
        return {
            "path": str(self._project_dir),
            "user_id": spec.user_id,
            "architecture": spec.architecture,
            "name": spec.name,
            "port": spec.port,
            "maj_version": spec.maj_version,
            "min_version": spec.min_version,
            "memory": spec.memory,
            "storage": spec.storage,
            "secret": self._tunnel_secret,
        }

    def render_text(self, spec: ServiceSpec) -> str:
        try:
            template = self._env.get_template(TEMPLATE_FILENAME)
            return template.render(self.context_for(spec))
        except TemplateError as e:
            raise RenderError(f"rendering {TEMPLATE_FILENAME}: {e}") from e

    def render(self, spec: ServiceSpec, destination: Path) -> Path:
        content = self.render_text(spec)
        output = destination / COMPOSE_FILE_NAME
        try:
            destination.mkdir(mode=0o755, parents=True, exist_ok=True)
            output.write_text(content)
        except OSError as e:
            raise RenderError(f"writing {output}: {e}") from e
        log.info("compose_rendered", path=str(output))
        return output


# --- Module Notes -----------------------------------------------------------
# The rendered file is the only input to the launch step; nothing else configures
# the started container.
