"""Abstract interfaces for account and artifact storage.

Business logic only talks to these interfaces, so the same services run
against the in-memory backend and the SQLite backend.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from codegen_share.auth.models import Account
from codegen_share.sharing.models import SharedArtifact


class AccountStore(ABC):
    """Abstract interface for account storage operations."""

    @abstractmethod
    async def create(
        self,
        username: str,
        password_hash: str,
        rate_limit_remaining: int,
        federated_id: str | None = None,
    ) -> Account:
        """Create an account with the next id.

        The uniqueness checks and the insert happen atomically.

        Raises:
            DuplicateUsernameError: If the username is taken
            DuplicateFederatedIdError: If the federated id is already linked

        """

    @abstractmethod
    async def get_by_id(self, account_id: int) -> Account | None:
        """Get an account by id."""

    @abstractmethod
    async def get_by_username(self, username: str) -> Account | None:
        """Get an account by username."""

    @abstractmethod
    async def get_by_federated_id(self, federated_id: str) -> Account | None:
        """Get an account by federated identity."""

    @abstractmethod
    async def consume_quota(self, account_id: int) -> int | None:
        """Atomically decrement the quota counter if it is above zero.

        Returns:
            The new remaining count, or None if the counter was already zero

        Raises:
            NotFoundError: If the account does not exist

        """

    @abstractmethod
    async def set_quota(self, account_id: int, value: int) -> bool:
        """Set one account's counter.

        Returns:
            True if the account exists, False otherwise

        """

    @abstractmethod
    async def set_all_quotas(self, value: int) -> int:
        """Set every account's counter.

        Returns:
            Number of accounts updated

        """


class ArtifactStore(ABC):
    """Abstract interface for shared-artifact storage operations."""

    @abstractmethod
    async def insert(self, artifact: SharedArtifact) -> bool:
        """Insert an artifact unless its share id is taken.

        Returns:
            True if inserted, False if the share id already exists

        """

    @abstractmethod
    async def get(self, share_id: str) -> SharedArtifact | None:
        """Get an artifact by share id, expired or not."""

    @abstractmethod
    async def delete(self, share_id: str) -> bool:
        """Delete an artifact.

        Returns:
            True if deleted, False if not found

        """

    @abstractmethod
    async def list_by_owner(self, owner_id: int) -> list[SharedArtifact]:
        """List an owner's artifacts, expired or not."""

    @abstractmethod
    async def list_all(self) -> list[SharedArtifact]:
        """List every stored artifact."""

    @abstractmethod
    async def delete_expired(self, now: datetime) -> int:
        """Delete artifacts whose expiry is at or before ``now``.

        Returns:
            Number of artifacts deleted

        """
