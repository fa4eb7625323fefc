"""Process-local storage backend."""

import itertools
from datetime import datetime

from structlog import get_logger

from codegen_share.auth.models import Account
from codegen_share.core.locks import KeyedLock
from codegen_share.exceptions import (
    DuplicateFederatedIdError,
    DuplicateUsernameError,
    NotFoundError,
)
from codegen_share.sharing.models import SharedArtifact
from codegen_share.storage.base import AccountStore, ArtifactStore


logger = get_logger(__name__)


class InMemoryAccountStore(AccountStore):
    """Accounts kept in dictionaries for the lifetime of the process.

    Check-and-insert for a username or federated id, and read-modify-write of
    a quota counter, run under per-key locks.
    """

    def __init__(self) -> None:
        self._accounts: dict[int, Account] = {}
        self._by_username: dict[str, int] = {}
        self._by_federated_id: dict[str, int] = {}
        self._ids = itertools.count(1)
        self._locks = KeyedLock()

    async def create(
        self,
        username: str,
        password_hash: str,
        rate_limit_remaining: int,
        federated_id: str | None = None,
    ) -> Account:
        keys: list[tuple[str, str]] = [("username", username)]
        if federated_id is not None:
            keys.append(("federated", federated_id))

        async with self._locks.hold(*keys):
            if username in self._by_username:
                raise DuplicateUsernameError(username)
            if federated_id is not None and federated_id in self._by_federated_id:
                raise DuplicateFederatedIdError(federated_id)

            account = Account(
                id=next(self._ids),
                username=username,
                password_hash=password_hash,
                federated_id=federated_id,
                rate_limit_remaining=rate_limit_remaining,
            )
            self._accounts[account.id] = account
            self._by_username[username] = account.id
            if federated_id is not None:
                self._by_federated_id[federated_id] = account.id

        return account.model_copy()

    async def get_by_id(self, account_id: int) -> Account | None:
        account = self._accounts.get(account_id)
        return account.model_copy() if account else None

    async def get_by_username(self, username: str) -> Account | None:
        account_id = self._by_username.get(username)
        return await self.get_by_id(account_id) if account_id is not None else None

    async def get_by_federated_id(self, federated_id: str) -> Account | None:
        account_id = self._by_federated_id.get(federated_id)
        return await self.get_by_id(account_id) if account_id is not None else None

    async def consume_quota(self, account_id: int) -> int | None:
        async with self._locks.hold(("quota", account_id)):
            account = self._accounts.get(account_id)
            if account is None:
                raise NotFoundError("Account not found")
            if account.rate_limit_remaining <= 0:
                return None
            account.rate_limit_remaining -= 1
            return account.rate_limit_remaining

    async def set_quota(self, account_id: int, value: int) -> bool:
        async with self._locks.hold(("quota", account_id)):
            account = self._accounts.get(account_id)
            if account is None:
                return False
            account.rate_limit_remaining = value
            return True

    async def set_all_quotas(self, value: int) -> int:
        updated = 0
        for account_id in list(self._accounts):
            if await self.set_quota(account_id, value):
                updated += 1
        return updated


class InMemoryArtifactStore(ArtifactStore):
    """Shared artifacts kept in a dictionary keyed by share id."""

    def __init__(self) -> None:
        self._artifacts: dict[str, SharedArtifact] = {}
        self._locks = KeyedLock()

    async def insert(self, artifact: SharedArtifact) -> bool:
        async with self._locks.hold(artifact.share_id):
            if artifact.share_id in self._artifacts:
                return False
            self._artifacts[artifact.share_id] = artifact.model_copy()
            return True

    async def get(self, share_id: str) -> SharedArtifact | None:
        artifact = self._artifacts.get(share_id)
        return artifact.model_copy() if artifact else None

    async def delete(self, share_id: str) -> bool:
        async with self._locks.hold(share_id):
            return self._artifacts.pop(share_id, None) is not None

    async def list_by_owner(self, owner_id: int) -> list[SharedArtifact]:
        return [
            artifact.model_copy()
            for artifact in list(self._artifacts.values())
            if artifact.owner_id == owner_id
        ]

    async def list_all(self) -> list[SharedArtifact]:
        return [artifact.model_copy() for artifact in list(self._artifacts.values())]

    async def delete_expired(self, now: datetime) -> int:
        expired = [
            share_id
            for share_id, artifact in list(self._artifacts.items())
            if artifact.is_expired(now)
        ]
        deleted = 0
        for share_id in expired:
            if await self.delete(share_id):
                deleted += 1
        if deleted:
            logger.debug("memory_artifacts_expired_deleted", count=deleted)
        return deleted
