"""FastAPI dependencies resolving sessions and consuming quota."""

from typing import Annotated

from fastapi import Depends, Request, Response

from codegen_share.auth.models import Account
from codegen_share.container import ServiceContainer
from codegen_share.exceptions import AuthenticationRequiredError


RATE_LIMIT_HEADER = "X-RateLimit-Remaining"


def get_container(request: Request) -> ServiceContainer:
    container: ServiceContainer = request.app.state.container
    return container


ContainerDep = Annotated[ServiceContainer, Depends(get_container)]


def get_session_token(request: Request, container: ContainerDep) -> str | None:
    """Session token from the cookie, or from an ``Authorization: Bearer`` header."""
    token = request.cookies.get(container.settings.security.cookie_name)
    if token:
        return token
    scheme, _, credentials = request.headers.get("authorization", "").partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return None


SessionTokenDep = Annotated[str | None, Depends(get_session_token)]


async def get_current_account(
    container: ContainerDep, token: SessionTokenDep
) -> Account | None:
    return await container.sessions.resolve(token)


async def require_account(
    account: Annotated[Account | None, Depends(get_current_account)],
) -> Account:
    """Reject the request with 401 unless it carries a valid session."""
    if account is None:
        raise AuthenticationRequiredError()
    return account


CurrentAccountDep = Annotated[Account, Depends(require_account)]


async def consume_quota(
    account: CurrentAccountDep,
    container: ContainerDep,
    response: Response,
) -> Account:
    """Charge one unit of the caller's quota before the handler runs.

    Raises:
        QuotaExceededError: If the caller has nothing left in this window

    """
    remaining = await container.limiter.try_consume(account.id)
    response.headers[RATE_LIMIT_HEADER] = str(remaining)
    return account.model_copy(update={"rate_limit_remaining": remaining})


QuotaAccountDep = Annotated[Account, Depends(consume_quota)]
OptionalAccountDep = Annotated[Account | None, Depends(get_current_account)]
