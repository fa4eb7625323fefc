"""Database package for the SQLite storage backend."""

from codegen_share.db.engine import dispose_db, get_engine, get_session, init_db
from codegen_share.db.models import AccountRecord, SharedArtifactRecord


__all__ = [
    "AccountRecord",
    "SharedArtifactRecord",
    "dispose_db",
    "get_engine",
    "get_session",
    "init_db",
]
