"""Identity store: account creation and lookup for local and federated login."""

import asyncio

import shortuuid
from structlog import get_logger

from codegen_share.auth.models import Account
from codegen_share.auth.passwords import PasswordHasher
from codegen_share.core.locks import KeyedLock
from codegen_share.exceptions import DuplicateFederatedIdError, DuplicateUsernameError
from codegen_share.storage.base import AccountStore


logger = get_logger(__name__)

FALLBACK_SUFFIX_LENGTH = 6
MAX_USERNAME_ATTEMPTS = 5


class IdentityStore:
    """Maps identities to account records."""

    def __init__(
        self,
        store: AccountStore,
        hasher: PasswordHasher,
        initial_quota: int,
    ) -> None:
        """Initialize the identity store.

        Args:
            store: Account storage backend
            hasher: Password hasher used for new secrets
            initial_quota: Quota counter given to every new account

        """
        self.store = store
        self.hasher = hasher
        self.initial_quota = initial_quota
        self._federated_locks = KeyedLock()

    async def create_account(
        self,
        username: str,
        password_secret: str,
        federated_id: str | None = None,
    ) -> Account:
        """Create an account from an already hashed secret.

        Raises:
            DuplicateUsernameError: If the username already exists

        """
        account = await self.store.create(
            username=username,
            password_hash=password_secret,
            rate_limit_remaining=self.initial_quota,
            federated_id=federated_id,
        )
        logger.info(
            "account_created",
            account_id=account.id,
            federated=federated_id is not None,
        )
        return account

    async def register_local(self, username: str, password: str) -> Account:
        """Hash a password and create a local account.

        Raises:
            DuplicateUsernameError: If the username already exists

        """
        if await self.store.get_by_username(username) is not None:
            raise DuplicateUsernameError(username)
        secret = await self.hasher.hash_async(password)
        return await self.create_account(username, secret)

    async def get_by_id(self, account_id: int) -> Account | None:
        return await self.store.get_by_id(account_id)

    async def get_by_username(self, username: str) -> Account | None:
        return await self.store.get_by_username(username)

    async def get_by_federated_id(self, federated_id: str) -> Account | None:
        return await self.store.get_by_federated_id(federated_id)

    async def register_federated_login(
        self, federated_id: str, email_or_id: str
    ) -> Account:
        """Return the account linked to a federated id, creating it if needed.

        New accounts get a random password secret nobody knows, so they stay
        hash-verifiable but cannot be entered by password. When the preferred
        username is already taken, a suffixed variant is used instead.

        Args:
            federated_id: Identity asserted by the provider
            email_or_id: Preferred username (email, or the provider id)

        Returns:
            The existing or newly created account

        """
        async with self._federated_locks.hold(federated_id):
            existing = await self.store.get_by_federated_id(federated_id)
            if existing is not None:
                return existing

            secret = await asyncio.to_thread(self.hasher.random_secret)
            for username in self._username_candidates(email_or_id, federated_id):
                try:
                    return await self.create_account(
                        username, secret, federated_id=federated_id
                    )
                except DuplicateUsernameError:
                    logger.info("federated_username_taken", federated_id=federated_id)
                except DuplicateFederatedIdError:
                    # Linked concurrently by another process sharing the backend
                    linked = await self.store.get_by_federated_id(federated_id)
                    if linked is not None:
                        return linked
                    raise

        raise DuplicateUsernameError(email_or_id)

    @staticmethod
    def _username_candidates(preferred: str, federated_id: str) -> list[str]:
        candidates = [preferred]
        if federated_id != preferred:
            candidates.append(federated_id)
        candidates.extend(
            f"{preferred}-{shortuuid.ShortUUID().random(length=FALLBACK_SUFFIX_LENGTH)}"
            for _ in range(MAX_USERNAME_ATTEMPTS)
        )
        return candidates
