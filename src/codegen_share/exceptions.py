"""Consolidated exception hierarchy for codegen-share.

Every error raised by the core carries the HTTP status code and error type the
API layer reports, so request handlers never translate errors by hand.
Error types use StrEnum for type safety and autocompletion.
"""

from enum import StrEnum
from typing import Any

from starlette import status


class ErrorType(StrEnum):
    """Error type codes for API responses."""

    INVALID_REQUEST = "invalid_request_error"
    AUTHENTICATION = "authentication_error"
    NOT_FOUND = "not_found_error"
    RATE_LIMIT = "rate_limit_error"
    CONFLICT = "conflict_error"
    DEPENDENCY = "dependency_error"
    SERVICE_UNAVAILABLE = "service_unavailable_error"
    INTERNAL_SERVER = "internal_server_error"


# ============================================================================
# Base Exceptions
# ============================================================================


class CodegenShareError(Exception):
    """Base exception for all codegen-share errors.

    Supports HTTP status codes, structured error details and extra response
    headers (e.g. ``Retry-After``).
    """

    def __init__(
        self,
        message: str,
        *,
        error_type: ErrorType | str = ErrorType.INTERNAL_SERVER,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if isinstance(error_type, str) and not isinstance(error_type, ErrorType):
            try:
                self.error_type = ErrorType(error_type)
            except ValueError:
                self.error_type = error_type  # type: ignore[assignment]
        else:
            self.error_type = error_type
        self.status_code = status_code
        self.details = details or {}
        self.headers = headers or {}


class ConfigurationError(CodegenShareError):
    """Raised when configuration loading or validation fails."""

    def __init__(self, message: str) -> None:
        super().__init__(message, error_type=ErrorType.INTERNAL_SERVER)


# ============================================================================
# API Errors (Client-facing)
# ============================================================================


class ValidationError(CodegenShareError):
    """Validation error (400)."""

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message,
            error_type=ErrorType.INVALID_REQUEST,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details,
        )


class AuthenticationError(CodegenShareError):
    """Authentication error (401)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(
            message,
            error_type=ErrorType.AUTHENTICATION,
            status_code=status.HTTP_401_UNAUTHORIZED,
        )


class AuthenticationRequiredError(AuthenticationError):
    """No valid session accompanied the request."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class InvalidCredentialsError(AuthenticationError):
    """Unknown username or wrong password.

    The message is the same in both cases so callers cannot enumerate
    usernames.
    """

    def __init__(self) -> None:
        super().__init__("Invalid username or password")


class OAuthError(AuthenticationError):
    """Federated login with the identity provider failed."""

    pass


class QuotaExceededError(CodegenShareError):
    """The account has no requests left in the current window (429)."""

    def __init__(
        self,
        message: str = "Rate limit exceeded. Wait for a minute",
        *,
        retry_after: int | None = None,
    ) -> None:
        headers = {"Retry-After": str(retry_after)} if retry_after else None
        super().__init__(
            message,
            error_type=ErrorType.RATE_LIMIT,
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            details={"retry_after": retry_after} if retry_after else None,
            headers=headers,
        )
        self.retry_after = retry_after


class NotFoundError(CodegenShareError):
    """Resource not found (404)."""

    def __init__(self, message: str = "Not found") -> None:
        super().__init__(
            message,
            error_type=ErrorType.NOT_FOUND,
            status_code=status.HTTP_404_NOT_FOUND,
        )


class ConflictError(CodegenShareError):
    """Resource already exists (409)."""

    def __init__(self, message: str) -> None:
        super().__init__(
            message,
            error_type=ErrorType.CONFLICT,
            status_code=status.HTTP_409_CONFLICT,
        )


class DuplicateUsernameError(ConflictError):
    """Username is already taken."""

    def __init__(self, username: str) -> None:
        super().__init__("Username already exists")
        self.username = username


class DuplicateFederatedIdError(ConflictError):
    """Federated identity is already linked to another account."""

    def __init__(self, federated_id: str) -> None:
        super().__init__("Federated identity already linked")
        self.federated_id = federated_id


class DependencyFailureError(CodegenShareError):
    """An external dependency (the code generation API) failed (502).

    Always retryable from the caller's point of view.
    """

    def __init__(self, message: str, *, retryable: bool = True) -> None:
        super().__init__(
            message,
            error_type=ErrorType.DEPENDENCY,
            status_code=status.HTTP_502_BAD_GATEWAY,
            details={"retryable": retryable},
        )
        self.retryable = retryable


# ============================================================================
# Internal Errors
# ============================================================================


class MalformedSecretError(CodegenShareError):
    """A stored password secret cannot be parsed.

    This indicates data corruption and is distinct from a wrong password.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(
            f"Stored password secret is malformed: {reason}",
            error_type=ErrorType.INTERNAL_SERVER,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


class StorageError(CodegenShareError):
    """The storage backend failed to complete an operation (503)."""

    def __init__(self, message: str) -> None:
        super().__init__(
            message,
            error_type=ErrorType.SERVICE_UNAVAILABLE,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )


class ShareIdCollisionError(CodegenShareError):
    """No free share id was found within the allowed attempts."""

    def __init__(self, attempts: int) -> None:
        super().__init__(
            f"Could not allocate a unique share id after {attempts} attempts",
            error_type=ErrorType.INTERNAL_SERVER,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
