"""
spinup.db

Persistence package (SQLAlchemy async over per-tenant SQLite files).

Responsibilities:
- Provide the cluster ORM model, engine/session setup, repository and store.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Each tenant owns one SQLite file; nothing here is shared across tenants except
# the lock table in `db.store`.
