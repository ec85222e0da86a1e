"""
spinup.db.repositories.clusters

Repository for `ClusterInfo` rows.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from spinup.db.models import ClusterInfo


class ClusterRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, *, cluster_id: str, name: str, port: int) -> ClusterInfo:
        row = ClusterInfo(cluster_id=cluster_id, name=name, port=port)
        self._session.add(row)
        await self._session.flush()
        return row

    async def list_all(self) -> list[ClusterInfo]:
        stmt = select(ClusterInfo).order_by(ClusterInfo.id)
        return list((await self._session.execute(stmt)).scalars().all())
