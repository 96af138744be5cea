from typing import Literal

from fastapi import APIRouter, Path

from app.api.deps import SessionDep, UserIdDep
from app.api.v1.schemas import (
    PullRequestDetailResponse,
    PullRequestFileResponse,
    PullRequestResponse,
)
from app.domain.pull_request.service import (
    get_repository_pull_request,
    list_repository_pull_request_files,
    list_repository_pull_requests,
)

router = APIRouter(prefix="/repositories/{repository_id}/pulls", tags=["pull-requests"])


@router.get("", response_model=list[PullRequestResponse])
async def list_pull_requests(
    repository_id: str,
    session: SessionDep,
    user_id: UserIdDep,
    state: Literal["open", "closed", "all"] = "open",
) -> list[PullRequestResponse]:
    items = await list_repository_pull_requests(session, user_id, repository_id, state)
    return [PullRequestResponse.from_domain(item) for item in items]


@router.get("/{pr_number}", response_model=PullRequestDetailResponse)
async def get_pull_request(
    repository_id: str,
    session: SessionDep,
    user_id: UserIdDep,
    pr_number: int = Path(ge=1),
) -> PullRequestDetailResponse:
    item = await get_repository_pull_request(session, user_id, repository_id, pr_number)
    return PullRequestDetailResponse.from_domain(item)


@router.get("/{pr_number}/files", response_model=list[PullRequestFileResponse])
async def list_pull_request_files(
    repository_id: str,
    session: SessionDep,
    user_id: UserIdDep,
    pr_number: int = Path(ge=1),
) -> list[PullRequestFileResponse]:
    files = await list_repository_pull_request_files(session, user_id, repository_id, pr_number)
    return [PullRequestFileResponse.from_domain(f) for f in files]
