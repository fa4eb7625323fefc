"""Repository layer implementing the storage interfaces over SQLite."""

from codegen_share.db.repositories.account_repo import SqlAccountStore
from codegen_share.db.repositories.artifact_repo import SqlArtifactStore


__all__ = ["SqlAccountStore", "SqlArtifactStore"]
