"""JWT generation and validation for session handles."""

from datetime import datetime, timedelta
from typing import Any

import jwt
import shortuuid
from structlog import get_logger


logger = get_logger(__name__)

ISSUER = "codegen-share"


class SessionTokenHandler:
    """Signs and validates session tokens."""

    ALGORITHM = "HS256"

    def __init__(self, secret_key: str) -> None:
        """Initialize JWT handler with secret key.

        Args:
            secret_key: Secret key for signing tokens (min 32 chars recommended)

        """
        if len(secret_key) < 32:
            logger.warning("session_secret_short", length=len(secret_key))
        self.secret_key = secret_key

    def generate_token(
        self,
        account_id: int,
        issued_at: datetime,
        lifetime: timedelta,
        remember: bool = False,
    ) -> tuple[str, str]:
        """Generate a signed JWT token.

        Args:
            account_id: Account the session belongs to
            issued_at: Issue time (aware datetime)
            lifetime: Time until expiration
            remember: Whether this is a remember-me session

        Returns:
            Tuple of (encoded token, token id)

        """
        token_id = shortuuid.uuid()
        payload = {
            "sub": str(account_id),
            "jti": token_id,
            "iat": issued_at,
            "exp": issued_at + lifetime,
            "iss": ISSUER,
            "rmb": remember,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.ALGORITHM), token_id

    def validate_token(
        self, token: str, now: datetime | None = None
    ) -> dict[str, object]:
        """Validate and decode a JWT token.

        Args:
            token: Encoded token
            now: Time to check expiry against; the wall clock when omitted

        Returns:
            Decoded payload dictionary

        Raises:
            ValueError: If token is invalid or expired

        """
        options: dict[str, Any] = {"require": ["sub", "jti", "exp", "iss"]}
        if now is not None:
            # Time claims are checked below against the caller's clock
            options.update(verify_exp=False, verify_iat=False, verify_nbf=False)
        try:
            payload: dict[str, object] = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.ALGORITHM],
                issuer=ISSUER,
                options=options,
            )
        except jwt.ExpiredSignatureError as e:
            raise ValueError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise ValueError(f"Invalid token: {e}") from e

        if now is not None and int(str(payload["exp"])) <= now.timestamp():
            raise ValueError("Token has expired")
        return payload

    def read_unverified_expiry(self, token: str) -> tuple[str, int] | None:
        """Return (jti, exp) of a correctly signed token, expired or not.

        Used by logout, which must accept a token that expired a second ago.
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.ALGORITHM],
                issuer=ISSUER,
                options={
                    "require": ["jti", "exp"],
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
        except jwt.InvalidTokenError:
            return None
        return str(payload["jti"]), int(payload["exp"])
