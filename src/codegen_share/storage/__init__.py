"""Storage abstraction and the in-memory backend."""

from codegen_share.storage.base import AccountStore, ArtifactStore
from codegen_share.storage.memory import InMemoryAccountStore, InMemoryArtifactStore


__all__ = [
    "AccountStore",
    "ArtifactStore",
    "InMemoryAccountStore",
    "InMemoryArtifactStore",
]
