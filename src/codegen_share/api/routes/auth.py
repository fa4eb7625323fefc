"""Local account routes: register, login, logout and current user."""

from fastapi import APIRouter, Response, status

from codegen_share.api.dependencies import (
    ContainerDep,
    CurrentAccountDep,
    SessionTokenDep,
)
from codegen_share.api.routes.cookies import clear_session_cookie, set_session_cookie
from codegen_share.auth.models import AccountPublic, Credentials, RegistrationRequest
from codegen_share.exceptions import InvalidCredentialsError


router = APIRouter(tags=["auth"])


@router.post(
    "/register",
    response_model=AccountPublic,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    body: RegistrationRequest, response: Response, container: ContainerDep
) -> AccountPublic:
    """Create a local account and sign it in.

    Returns 409 when the username is taken.
    """
    account = await container.identity.register_local(body.username, body.password)
    session = container.sessions.issue(account.id, remember=body.remember_me)
    set_session_cookie(response, session, container.settings.security)
    return AccountPublic.from_account(account)


@router.post("/login", response_model=AccountPublic)
async def login(
    body: Credentials, response: Response, container: ContainerDep
) -> AccountPublic:
    session = await container.sessions.login(
        body.username, body.password, remember=body.remember_me
    )
    set_session_cookie(response, session, container.settings.security)
    account = await container.identity.get_by_id(session.account_id)
    if account is None:
        raise InvalidCredentialsError()
    return AccountPublic.from_account(account)


@router.post("/logout")
async def logout(
    response: Response, container: ContainerDep, token: SessionTokenDep
) -> dict[str, bool]:
    """End the current session. Succeeds without a session too."""
    container.sessions.revoke(token)
    clear_session_cookie(response, container.settings.security)
    return {"success": True}


@router.get("/user", response_model=AccountPublic)
async def current_user(account: CurrentAccountDep) -> AccountPublic:
    return AccountPublic.from_account(account)
