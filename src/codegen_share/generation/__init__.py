"""Pass-through client for the external code generation API."""

from codegen_share.generation.models import (
    CATEGORIES,
    SUPPORTED_LANGUAGES,
    CodeGenerationRequest,
    CodeGenerationResponse,
)


__all__ = [
    "CATEGORIES",
    "SUPPORTED_LANGUAGES",
    "CodeGenerationRequest",
    "CodeGenerationResponse",
]
