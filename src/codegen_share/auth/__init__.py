"""Credential hashing, identity and session handling."""

from codegen_share.auth.models import (
    Account,
    AccountPublic,
    Credentials,
    FederatedProfile,
    RegistrationRequest,
    Session,
)
from codegen_share.auth.passwords import PasswordHasher
from codegen_share.auth.tokens import SessionTokenHandler


__all__ = [
    "Account",
    "AccountPublic",
    "Credentials",
    "FederatedProfile",
    "PasswordHasher",
    "RegistrationRequest",
    "Session",
    "SessionTokenHandler",
]
