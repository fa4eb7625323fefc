"""scrypt password hashing with constant-time verification.

Stored secrets have the form ``"<digest hex>.<salt hex>"``. The salt is
used as its hex text, so the format stays interchangeable with secrets
produced by other scrypt implementations that pass the salt as a string.
"""

import asyncio
import binascii
import secrets

from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from codegen_share.exceptions import MalformedSecretError


SEPARATOR = "."
DEFAULT_COST = 2**14
MIN_SALT_BYTES = 16


class PasswordHasher:
    """One-way password hashing with scrypt."""

    def __init__(
        self,
        cost: int = DEFAULT_COST,
        block_size: int = 8,
        parallelism: int = 1,
        key_length: int = 64,
        salt_bytes: int = MIN_SALT_BYTES,
    ) -> None:
        """Initialize the hasher.

        Args:
            cost: scrypt N parameter (power of two)
            block_size: scrypt r parameter
            parallelism: scrypt p parameter
            key_length: Derived key length in bytes
            salt_bytes: Random salt length in bytes (at least 16)

        """
        if salt_bytes < MIN_SALT_BYTES:
            raise ValueError(f"salt_bytes must be at least {MIN_SALT_BYTES}")
        self.cost = cost
        self.block_size = block_size
        self.parallelism = parallelism
        self.key_length = key_length
        self.salt_bytes = salt_bytes

    def _derive(self, password: str, salt: str) -> bytes:
        # A Scrypt instance derives once, so each call builds its own
        kdf = Scrypt(
            salt=salt.encode("ascii"),
            length=self.key_length,
            n=self.cost,
            r=self.block_size,
            p=self.parallelism,
        )
        return kdf.derive(password.encode("utf-8"))

    def hash(self, password: str) -> str:
        """Hash a password with a fresh random salt.

        Returns:
            Serialized secret containing digest and salt

        """
        salt = secrets.token_hex(self.salt_bytes)
        digest = self._derive(password, salt)
        return f"{digest.hex()}{SEPARATOR}{salt}"

    def _parse(self, secret: str) -> tuple[bytes, str]:
        parts = secret.split(SEPARATOR)
        if len(parts) != 2:
            raise MalformedSecretError("missing salt separator")
        digest_hex, salt = parts
        try:
            digest = binascii.unhexlify(digest_hex)
            binascii.unhexlify(salt)
        except (binascii.Error, ValueError) as e:
            raise MalformedSecretError("not hex encoded") from e
        if len(digest) != self.key_length:
            raise MalformedSecretError(
                f"digest is {len(digest)} bytes, expected {self.key_length}"
            )
        if len(salt) < 2 * MIN_SALT_BYTES:
            raise MalformedSecretError("salt too short")
        return digest, salt

    def verify(self, password: str, secret: str) -> bool:
        """Check a password against a stored secret.

        The comparison takes the same time wherever the first differing
        byte is.

        Raises:
            MalformedSecretError: If the stored secret cannot be parsed

        """
        expected, salt = self._parse(secret)
        supplied = self._derive(password, salt)
        return secrets.compare_digest(expected, supplied)

    async def hash_async(self, password: str) -> str:
        """Hash in a worker thread so the event loop keeps serving."""
        return await asyncio.to_thread(self.hash, password)

    async def verify_async(self, password: str, secret: str) -> bool:
        """Verify in a worker thread so the event loop keeps serving."""
        return await asyncio.to_thread(self.verify, password, secret)

    def random_secret(self) -> str:
        """Hash a random, never-disclosed password.

        Used for accounts that only log in through a federated provider.
        """
        return self.hash(secrets.token_hex(32))
