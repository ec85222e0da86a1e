"""
tests.test_compose

Compose rendering: output content, determinism, and failure modes.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from conftest import scenario_body

from spinup.provisioning.compose import COMPOSE_FILE_NAME, ComposeRenderer
from spinup.provisioning.errors import RenderError
from spinup.provisioning.models import ServiceRequest, ServiceSpec


def _spec(port: int = 5433) -> ServiceSpec:
    req = ServiceRequest.model_validate(scenario_body())
    return ServiceSpec.from_request(req, architecture="arm64v8", port=port)


def test_render_writes_compose_file(tmp_path: Path) -> None:
    renderer = ComposeRenderer(project_dir=tmp_path)
    dest = tmp_path / "u1" / "postgres"

    out = renderer.render(_spec(), dest)

    assert out == dest / COMPOSE_FILE_NAME
    text = out.read_text()
    assert "image: arm64v8/postgres:9.6" in text
    assert '- "5433:5432"' in text
    assert "container_name: u1-postgres" in text
    assert f"{tmp_path}/u1/postgres/data" in text
    assert "POSTGRES_HOST_AUTH_METHOD: trust" in text


def test_render_is_deterministic(tmp_path: Path) -> None:
    renderer = ComposeRenderer(project_dir=tmp_path)
    first = renderer.render(_spec(), tmp_path / "a").read_bytes()
    second = renderer.render(_spec(), tmp_path / "b").read_bytes()
    assert first == second


def test_render_overwrites_previous_content(tmp_path: Path) -> None:
    dest = tmp_path / "svc"
    dest.mkdir()
    (dest / COMPOSE_FILE_NAME).write_text("stale: true\n" * 100)

    ComposeRenderer(project_dir=tmp_path).render(_spec(), dest)

    assert "stale" not in (dest / COMPOSE_FILE_NAME).read_text()


def test_tunnel_secret_is_rendered(tmp_path: Path) -> None:
    renderer = ComposeRenderer(project_dir=tmp_path, tunnel_secret="s3cr3t")
    text = renderer.render_text(_spec())
    assert 'POSTGRES_PASSWORD: "s3cr3t"' in text
    assert "POSTGRES_HOST_AUTH_METHOD" not in text


def test_missing_template_is_render_error(tmp_path: Path) -> None:
    renderer = ComposeRenderer(project_dir=tmp_path, template_dir=tmp_path / "nope")
    with pytest.raises(RenderError):
        renderer.render(_spec(), tmp_path / "out")
    assert not (tmp_path / "out" / COMPOSE_FILE_NAME).exists()


def test_incomplete_substitution_is_render_error(tmp_path: Path) -> None:
    templates = tmp_path / "templates"
    templates.mkdir()
    (templates / "docker-compose.yml.j2").write_text("port: {{ port }}\nzone: {{ zone }}\n")

    renderer = ComposeRenderer(project_dir=tmp_path, template_dir=templates)
    with pytest.raises(RenderError):
        renderer.render_text(_spec())


def test_unwritable_destination_is_render_error(tmp_path: Path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("x")
    with pytest.raises(RenderError):
        ComposeRenderer(project_dir=tmp_path).render(_spec(), blocker / "svc")


@pytest.mark.parametrize(
    ("memory", "storage"),
    [
        ("1g\n    privileged: true", "200"),
        ("32MB", 'x"\n    network_mode: "host'),
    ],
)
def test_resource_values_stay_inside_their_scalars(
    tmp_path: Path, memory: str, storage: str
) -> None:
    spec = ServiceSpec(
        user_id="u1",
        name="postgres",
        architecture="amd64",
        port=5432,
        maj_version=9,
        min_version=6,
        memory=memory,
        storage=storage,
    )
    text = ComposeRenderer(project_dir=tmp_path).render_text(spec)

    service_keys = [
        line.strip().split(":", 1)[0]
        for line in text.splitlines()
        if line.startswith("    ") and not line.startswith("     ")
    ]
    assert service_keys == [
        "image",
        "container_name",
        "restart",
        "mem_limit",
        "environment",
        "ports",
        "volumes",
        "labels",
    ]
    assert "privileged" not in service_keys
    assert "network_mode" not in service_keys


def test_resource_values_are_quoted(tmp_path: Path) -> None:
    text = ComposeRenderer(project_dir=tmp_path).render_text(_spec())
    assert 'mem_limit: "32mb"' in text
    assert 'host.spinup.storage: "200"' in text
