"""Session manager: login variants, session issue, resolution and revocation.

A session is a signed token naming an account id. Nothing is stored per
session except the ids of revoked tokens, which are kept until the token
would have expired anyway.
"""

import asyncio
from datetime import timedelta

from structlog import get_logger

from codegen_share.auth.identity import IdentityStore
from codegen_share.auth.models import Account, FederatedProfile, Session
from codegen_share.auth.passwords import PasswordHasher
from codegen_share.auth.tokens import SessionTokenHandler
from codegen_share.core.clock import Clock, utc_now
from codegen_share.exceptions import InvalidCredentialsError


logger = get_logger(__name__)

DEFAULT_SESSION_LIFETIME = timedelta(hours=24)
DEFAULT_REMEMBER_LIFETIME = timedelta(days=30)


class SessionManager:
    """Authenticates accounts and issues session handles."""

    def __init__(
        self,
        identity: IdentityStore,
        hasher: PasswordHasher,
        tokens: SessionTokenHandler,
        *,
        session_lifetime: timedelta = DEFAULT_SESSION_LIFETIME,
        remember_lifetime: timedelta = DEFAULT_REMEMBER_LIFETIME,
        clock: Clock = utc_now,
    ) -> None:
        self.identity = identity
        self.hasher = hasher
        self.tokens = tokens
        self.session_lifetime = session_lifetime
        self.remember_lifetime = remember_lifetime
        self._clock = clock
        self._revoked: dict[str, int] = {}
        self._dummy_secret: str | None = None

    async def _get_dummy_secret(self) -> str:
        # Verified against for unknown usernames so they cost one KDF run too
        if self._dummy_secret is None:
            self._dummy_secret = await asyncio.to_thread(self.hasher.random_secret)
        return self._dummy_secret

    def issue(self, account_id: int, remember: bool = False) -> Session:
        """Issue a session for an account.

        Args:
            account_id: Authenticated account
            remember: Use the extended remember-me lifetime

        """
        lifetime = self.remember_lifetime if remember else self.session_lifetime
        now = self._clock()
        token, _ = self.tokens.generate_token(
            account_id=account_id,
            issued_at=now,
            lifetime=lifetime,
            remember=remember,
        )
        return Session(
            token=token,
            account_id=account_id,
            expires_at=now + lifetime,
            remember=remember,
            max_age_seconds=int(lifetime.total_seconds()),
        )

    async def login(
        self, username: str, password: str, remember: bool = False
    ) -> Session:
        """Authenticate with username and password.

        Unknown usernames and wrong passwords fail the same way and take
        the same time.

        Raises:
            InvalidCredentialsError: If the credentials do not match an account
            MalformedSecretError: If the stored secret is corrupt

        """
        account = await self.identity.get_by_username(username)
        if account is None:
            await self.hasher.verify_async(password, await self._get_dummy_secret())
            logger.info("login_failed")
            raise InvalidCredentialsError()

        if not await self.hasher.verify_async(password, account.password_hash):
            logger.info("login_failed")
            raise InvalidCredentialsError()

        logger.info("login_succeeded", account_id=account.id, method="local")
        return self.issue(account.id, remember=remember)

    async def login_federated(
        self,
        federated_id: str,
        profile: FederatedProfile,
        remember: bool = False,
    ) -> Session:
        """Authenticate with an identity asserted by a federated provider.

        The account is created on first login and reused afterwards.
        """
        account = await self.identity.register_federated_login(
            federated_id, profile.email or federated_id
        )
        logger.info("login_succeeded", account_id=account.id, method="federated")
        return self.issue(account.id, remember=remember)

    async def resolve(self, token: str | None) -> Account | None:
        """Resolve a session token to its account.

        Returns:
            The account, or None for missing, tampered, expired, revoked or
            orphaned tokens

        """
        if not token:
            return None
        try:
            payload = self.tokens.validate_token(token, now=self._clock())
            account_id = int(str(payload["sub"]))
        except ValueError as e:
            logger.debug("session_rejected", reason=str(e))
            return None

        if str(payload["jti"]) in self._revoked:
            logger.debug("session_rejected", reason="revoked")
            return None

        return await self.identity.get_by_id(account_id)

    def revoke(self, token: str | None) -> None:
        """Invalidate a session token. Revoking twice is harmless."""
        if not token:
            return
        claims = self.tokens.read_unverified_expiry(token)
        if claims is None:
            return
        token_id, expires = claims
        self._revoked[token_id] = expires
        self._prune_revoked()
        logger.info("session_revoked")

    def _prune_revoked(self) -> None:
        now = self._clock().timestamp()
        for token_id in [t for t, exp in self._revoked.items() if exp <= now]:
            del self._revoked[token_id]
