"""Minimal request context for tracking request IDs."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class RequestContext:
    """Request ID plus a little metadata collected while the request runs."""

    request_id: str
    method: str = ""
    path: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)
