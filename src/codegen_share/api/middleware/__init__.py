"""API middleware for codegen-share."""

from codegen_share.api.middleware.errors import setup_error_handlers
from codegen_share.api.middleware.logging import AccessLogMiddleware
from codegen_share.api.middleware.request_id import RequestIDMiddleware


__all__ = [
    "AccessLogMiddleware",
    "RequestIDMiddleware",
    "setup_error_handlers",
]
