"""Code generation route."""

from fastapi import APIRouter

from codegen_share.api.dependencies import ContainerDep, QuotaAccountDep
from codegen_share.generation.models import (
    CodeGenerationRequest,
    CodeGenerationResponse,
)


router = APIRouter(tags=["generate"])


@router.post("/generate", response_model=CodeGenerationResponse)
async def generate_code(
    body: CodeGenerationRequest, account: QuotaAccountDep, container: ContainerDep
) -> CodeGenerationResponse:
    """Generate code for a prompt. Costs one unit of quota.

    The quota is charged before the provider is called and is not refunded
    when the provider fails.
    """
    code = await container.generator.generate(body)
    return CodeGenerationResponse(code=code)
