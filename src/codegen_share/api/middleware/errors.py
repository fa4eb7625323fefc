"""Error handling for the codegen-share API.

Every CodegenShareError carries its own status code, error type and extra
headers, so one handler renders them all as
``{"error": {"type": ..., "message": ...}}``.
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException
from structlog import get_logger

from codegen_share.exceptions import CodegenShareError, ErrorType


logger = get_logger(__name__)


def _store_status_code(request: Request, status_code: int) -> None:
    """Store status code in request state for access logging."""
    context = getattr(request.state, "context", None)
    if context is not None:
        context.metadata["status_code"] = status_code


def _get_client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def _build_error_response(
    status_code: int,
    error_type: str,
    message: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build standardized error response."""
    return JSONResponse(
        status_code=status_code,
        content={"error": {"type": error_type, "message": message}},
        headers=headers or None,
    )


def setup_error_handlers(app: FastAPI) -> None:
    """Setup error handlers for the FastAPI application."""

    @app.exception_handler(CodegenShareError)
    async def codegen_share_error_handler(
        request: Request, exc: CodegenShareError
    ) -> JSONResponse:
        """Handle all CodegenShareError subclasses using their built-in attributes."""
        _store_status_code(request, exc.status_code)
        error_type = str(exc.error_type)

        log_kwargs: dict[str, Any] = {
            "error_class": type(exc).__name__,
            "error_type": error_type,
            "error_message": exc.message,
            "status_code": exc.status_code,
            "request_method": request.method,
            "request_path": request.url.path,
        }
        if exc.status_code in (401, 403, 429):
            log_kwargs["client_ip"] = _get_client_ip(request)

        if exc.status_code >= 500:
            logger.error("request_failed", **log_kwargs)
        else:
            logger.info("request_rejected", **log_kwargs)

        return _build_error_response(
            exc.status_code, error_type, exc.message, exc.headers
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Malformed bodies are reported without echoing the input back."""
        _store_status_code(request, status.HTTP_400_BAD_REQUEST)
        logger.info(
            "request_invalid",
            request_method=request.method,
            request_path=request.url.path,
            fields=[".".join(str(p) for p in err["loc"]) for err in exc.errors()],
        )
        return _build_error_response(
            status.HTTP_400_BAD_REQUEST,
            ErrorType.INVALID_REQUEST,
            "Invalid request format",
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Handle routing errors such as unknown paths and wrong methods."""
        _store_status_code(request, exc.status_code)
        if exc.status_code == 404:
            error_type = ErrorType.NOT_FOUND.value
        elif exc.status_code < 500:
            error_type = ErrorType.INVALID_REQUEST.value
        else:
            error_type = ErrorType.INTERNAL_SERVER.value
        logger.debug(
            "http_exception",
            status_code=exc.status_code,
            request_method=request.method,
            request_path=request.url.path,
        )
        return _build_error_response(
            exc.status_code, error_type, str(exc.detail), exc.headers
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle all other unhandled exceptions."""
        _store_status_code(request, status.HTTP_500_INTERNAL_SERVER_ERROR)
        logger.error(
            "unhandled_exception",
            error_message=str(exc),
            request_method=request.method,
            request_path=request.url.path,
            exc_info=True,
        )
        return _build_error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            ErrorType.INTERNAL_SERVER,
            "An internal server error occurred",
        )
