"""Command line interface for codegen-share."""

from .main import app, main


__all__ = ["app", "main"]
