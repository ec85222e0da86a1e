"""
spinup.provisioning.models

Request/response and working models for the provisioning workflow.

Responsibilities:
- `ServiceRequest`: the JSON body accepted by `POST /createservice`.
- `ServiceSpec`: a validated request plus the values filled in while
  provisioning (architecture, allocated port).
- `ProvisionedService`: the response payload.
- `ClusterRecord`: the row handed to the metadata store.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

SUPPORTED_ENGINES: frozenset[str] = frozenset({"postgres"})

# Sizes such as "32MB", "1g", "0.5GB"; nothing that could break out of a YAML scalar.
MEMORY_PATTERN = r"^[0-9]+(\.[0-9]+)?[bkmgBKMG][bB]?$"
STORAGE_PATTERN = r"^[0-9]+(\.[0-9]+)?([kmgtKMGT][bB]?)?$"


class Version(BaseModel):
    model_config = ConfigDict(extra="forbid")

    maj: int = Field(ge=0)
    min: int = Field(ge=0)


class DatabaseResource(BaseModel):
    model_config = ConfigDict(extra="forbid")

    version: Version
    memory: str = Field(max_length=32, pattern=MEMORY_PATTERN)
    storage: Annotated[int, Field(ge=0)] | Annotated[
        str, Field(max_length=32, pattern=STORAGE_PATTERN)
    ]


class ServiceRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # `name` is both the engine name and the cluster name on disk.
    name: str = Field(min_length=1, max_length=64, pattern=r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")
    duration: int = Field(ge=0)
    resource: DatabaseResource
    userid: str = Field(min_length=1, max_length=128, pattern=r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")


@dataclass(frozen=True, slots=True)
class ServiceSpec:
    user_id: str
    name: str
    architecture: str
    port: int
    maj_version: int
    min_version: int
    memory: str
    storage: str

    @classmethod
    def from_request(cls, req: ServiceRequest, *, architecture: str, port: int) -> ServiceSpec:
        return cls(
            user_id=req.userid,
            name=req.name,
            architecture=architecture,
            port=port,
            maj_version=req.resource.version.maj,
            min_version=req.resource.version.min,
            memory=req.resource.memory,
            storage=str(req.resource.storage),
        )


class ProvisionedService(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    host_name: str = Field(alias="HostName")
    port: int = Field(alias="Port")
    container_id: str = Field(alias="ContainerID")


@dataclass(frozen=True, slots=True)
class ClusterRecord:
    cluster_id: str
    name: str
    port: int


# --- Module Notes -----------------------------------------------------------
# The name/userid patterns keep both values safe to use as path segments under
# the project directory.
