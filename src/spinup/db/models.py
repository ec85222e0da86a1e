"""
spinup.db.models

Per-tenant persistence schema.

Responsibilities:
- Define `ClusterInfo`, one row per successfully provisioned cluster.
"""

from __future__ import annotations

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from spinup.db.base import Base


class ClusterInfo(Base):
    __tablename__ = "clusterInfo"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Column names match stores written by earlier deployments.
    cluster_id: Mapped[str | None] = mapped_column("clusterId", Text, nullable=True)
    name: Mapped[str | None] = mapped_column("Name", Text, nullable=True)
    port: Mapped[int | None] = mapped_column("Port", Integer, nullable=True)


# --- Module Notes -----------------------------------------------------------
# Rows are append-only: this service never updates or deletes cluster records.
