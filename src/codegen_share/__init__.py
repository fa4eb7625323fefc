"""codegen-share - AI code generation with quota-guarded, expiring shared snippets."""

from ._version import __version__


__all__ = ["__version__"]
