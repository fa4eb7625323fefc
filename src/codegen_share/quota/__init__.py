"""Per-account fixed-window request quota."""

from codegen_share.quota.limiter import RateLimiter


__all__ = ["RateLimiter"]
