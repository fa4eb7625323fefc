"""Session cookie helpers."""

from fastapi import Response

from codegen_share.auth.models import Session
from codegen_share.config.security import SecuritySettings


def set_session_cookie(
    response: Response, session: Session, security: SecuritySettings
) -> None:
    response.set_cookie(
        key=security.cookie_name,
        value=session.token,
        max_age=session.max_age_seconds,
        httponly=True,
        secure=security.cookie_secure,
        samesite=security.cookie_samesite,
        path="/",
    )


def clear_session_cookie(response: Response, security: SecuritySettings) -> None:
    response.delete_cookie(
        key=security.cookie_name,
        httponly=True,
        secure=security.cookie_secure,
        samesite=security.cookie_samesite,
        path="/",
    )
