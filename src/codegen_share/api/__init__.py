"""HTTP API for codegen-share."""

from codegen_share.api.app import create_app, get_app


__all__ = ["create_app", "get_app"]
