"""Access logging middleware for structured HTTP request/response logging."""

import asyncio
import time

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint


logger = structlog.get_logger(__name__)


def _extract_request_id(request: Request) -> str | None:
    """Extract request ID from request state if available."""
    request_id = getattr(request.state, "request_id", None)
    return str(request_id) if request_id is not None else None


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Middleware for structured access logging.

    Query strings, bodies and cookies are never logged; they can carry
    OAuth codes, passwords or session tokens.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        path = str(request.url.path)

        response: Response | None = None
        error_message: str | None = None

        try:
            response = await call_next(request)
        except (Exception, asyncio.CancelledError) as e:
            error_message = str(e)
            raise
        finally:
            duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
            if response is not None:
                logger.info(
                    "request_complete",
                    request_id=_extract_request_id(request),
                    method=method,
                    path=path,
                    status_code=response.status_code,
                    duration_ms=duration_ms,
                    client_ip=client_ip,
                    rate_limit_remaining=response.headers.get(
                        "x-ratelimit-remaining"
                    ),
                )
            else:
                logger.error(
                    "request_error",
                    request_id=_extract_request_id(request),
                    method=method,
                    path=path,
                    duration_ms=duration_ms,
                    client_ip=client_ip,
                    error_message=error_message or "No response generated",
                )

        return response
