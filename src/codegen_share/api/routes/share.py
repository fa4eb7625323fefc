"""Shared-artifact routes."""

from fastapi import APIRouter, status

from codegen_share.api.dependencies import (
    ContainerDep,
    CurrentAccountDep,
    QuotaAccountDep,
)
from codegen_share.exceptions import NotFoundError
from codegen_share.sharing.models import ShareCreate, SharedArtifact


router = APIRouter(tags=["share"])


@router.post(
    "/share",
    response_model=SharedArtifact,
    status_code=status.HTTP_201_CREATED,
)
async def create_share(
    body: ShareCreate, account: QuotaAccountDep, container: ContainerDep
) -> SharedArtifact:
    """Publish a snippet. Costs one unit of quota."""
    return await container.artifacts.publish(
        owner_id=account.id,
        language=body.language,
        prompt=body.prompt,
        code=body.code,
        is_public=body.is_public,
    )


@router.get("/share/{share_id}", response_model=SharedArtifact)
async def get_share(share_id: str, container: ContainerDep) -> SharedArtifact:
    """Anyone holding the share id can read the artifact until it expires."""
    artifact = await container.artifacts.get(share_id)
    if artifact is None:
        raise NotFoundError("Shared code not found or expired")
    return artifact


@router.get("/user/shared", response_model=list[SharedArtifact])
async def list_user_shares(
    account: CurrentAccountDep, container: ContainerDep
) -> list[SharedArtifact]:
    return await container.artifacts.list_by_owner(account.id)
