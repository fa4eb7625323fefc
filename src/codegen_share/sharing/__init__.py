"""Shared-artifact publication with expiring short ids."""

from codegen_share.sharing.models import ShareCreate, SharedArtifact


__all__ = ["ShareCreate", "SharedArtifact"]
