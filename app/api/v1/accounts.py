from fastapi import APIRouter

from app.api.deps import SessionDep, UserIdDep
from app.api.v1.schemas import AccountResponse, LinkGitHubRequest
from app.domain.account.service import (
    GITHUB_PROVIDER,
    link_github_account,
    unlink_github_account,
)

router = APIRouter(prefix="/accounts", tags=["accounts"])


@router.put("/github", response_model=AccountResponse)
async def link_github(
    request: LinkGitHubRequest, session: SessionDep, user_id: UserIdDep
) -> AccountResponse:
    await link_github_account(session, user_id, request.access_token)
    return AccountResponse(provider=GITHUB_PROVIDER, linked=True)


@router.delete("/github", response_model=AccountResponse)
async def unlink_github(session: SessionDep, user_id: UserIdDep) -> AccountResponse:
    await unlink_github_account(session, user_id)
    return AccountResponse(provider=GITHUB_PROVIDER, linked=False)
