"""
spinup.db.store

Per-tenant metadata store.

Responsibilities:
- Open (creating if absent) `<project_dir>/<tenant>/<tenant>.db`.
- Ensure the `clusterInfo` table exists and append one row per provision in a
  single transaction.
- Serialize writes to the same store file; different tenants never contend.
"""

from __future__ import annotations

import asyncio
import threading
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError

from spinup.db.base import Base
from spinup.db.models import ClusterInfo
from spinup.db.repositories.clusters import ClusterRepo
from spinup.db.session import create_engine, create_sessionmaker, sqlite_url
from spinup.observability.logging import get_logger
from spinup.provisioning.errors import PersistError
from spinup.provisioning.models import ClusterRecord

log = get_logger(__name__)


class MetadataStore:
    def __init__(self, *, project_dir: Path) -> None:
        self._project_dir = project_dir
        self._locks: dict[Path, asyncio.Lock] = {}
        self._locks_guard = threading.Lock()

    def store_path(self, user_id: str) -> Path:
        return self._project_dir / user_id / f"{user_id}.db"

    def _lock_for(self, path: Path) -> asyncio.Lock:
        with self._locks_guard:
            lock = self._locks.get(path)
            if lock is None:
                lock = self._locks[path] = asyncio.Lock()
            return lock

    async def record(self, user_id: str, record: ClusterRecord) -> ClusterRecord:
        path = self.store_path(user_id)
        async with self._lock_for(path):
            try:
                path.parent.mkdir(mode=0o755, parents=True, exist_ok=True)
            except OSError as e:
                raise PersistError(f"creating store directory {path.parent}: {e}") from e

            engine = create_engine(sqlite_url(path))
            try:
                async with engine.begin() as conn:
                    await conn.run_sync(Base.metadata.create_all)
                sessions = create_sessionmaker(engine)
                async with sessions() as session, session.begin():
                    await ClusterRepo(session).add(
                        cluster_id=record.cluster_id, name=record.name, port=record.port
                    )
            except SQLAlchemyError as e:
                raise PersistError(f"recording cluster in {path}: {e}") from e
            finally:
                await engine.dispose()

        log.info("cluster_recorded", store=str(path), cluster_id=record.cluster_id)
        return record

    async def list_clusters(self, user_id: str) -> list[ClusterRecord]:
        path = self.store_path(user_id)
        if not path.exists():
            return []
        engine = create_engine(sqlite_url(path))
        try:
            sessions = create_sessionmaker(engine)
            async with sessions() as session:
                rows: list[ClusterInfo] = await ClusterRepo(session).list_all()
        except SQLAlchemyError as e:
            raise PersistError(f"reading clusters from {path}: {e}") from e
        finally:
            await engine.dispose()
        return [
            ClusterRecord(cluster_id=r.cluster_id or "", name=r.name or "", port=r.port or 0)
            for r in rows
        ]


# --- Module Notes -----------------------------------------------------------
# `session.begin()` commits on clean exit and rolls back on error, so a failed
# insert leaves no partial row behind.
# `_locks` keeps one entry per tenant store path and is never pruned. Growth is
# bounded by the number of tenants, which is deliberate: dropping an entry while
# a writer holds it would let a second writer take a fresh lock for the same file.
