"""Core helpers shared across codegen-share."""

from codegen_share.core.clock import Clock, utc_now
from codegen_share.core.locks import KeyedLock
from codegen_share.core.request_context import RequestContext


__all__ = ["Clock", "KeyedLock", "RequestContext", "utc_now"]
