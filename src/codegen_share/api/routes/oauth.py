"""Google federated login routes."""

from fastapi import APIRouter, Query
from fastapi.responses import RedirectResponse
from structlog import get_logger

from codegen_share.api.dependencies import ContainerDep
from codegen_share.api.routes.cookies import set_session_cookie
from codegen_share.exceptions import NotFoundError, OAuthError


logger = get_logger(__name__)

router = APIRouter(tags=["oauth"])

SUCCESS_REDIRECT = "/"
FAILURE_REDIRECT = "/auth"


@router.get("/google")
async def google_login(container: ContainerDep) -> RedirectResponse:
    """Send the browser to Google's consent screen."""
    if container.oauth is None:
        raise NotFoundError("Google login is not configured")
    logger.info("oauth_flow_started", provider="google")
    return RedirectResponse(container.oauth.begin())


@router.get("/google/callback")
async def google_callback(
    container: ContainerDep,
    code: str | None = Query(default=None),
    state: str | None = Query(default=None),
    error: str | None = Query(default=None),
) -> RedirectResponse:
    """Finish a Google login and redirect home, or back to the login page."""
    if container.oauth is None:
        raise NotFoundError("Google login is not configured")

    if error:
        logger.info("oauth_flow_denied", provider="google", error=error)
        return RedirectResponse(FAILURE_REDIRECT)

    try:
        profile = await container.oauth.authenticate(code, state)
    except OAuthError as e:
        logger.warning("oauth_flow_failed", provider="google", error=e.message)
        return RedirectResponse(FAILURE_REDIRECT)

    session = await container.sessions.login_federated(profile.provider_id, profile)
    response = RedirectResponse(SUCCESS_REDIRECT)
    set_session_cookie(response, session, container.settings.security)
    logger.info(
        "oauth_flow_completed", provider="google", account_id=session.account_id
    )
    return response
