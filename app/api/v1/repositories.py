from fastapi import APIRouter

from app.api.deps import SessionDep, UserIdDep
from app.api.v1.schemas import (
    ConnectRequest,
    ConnectResponse,
    DisconnectResponse,
    GitHubRepoResponse,
    RepositoryResponse,
)
from app.domain.repository.service import (
    connect_repositories,
    disconnect_repository,
    fetch_github_repositories,
    list_connected_repositories,
)

router = APIRouter(prefix="/repositories", tags=["repositories"])


@router.get("", response_model=list[RepositoryResponse])
async def list_repositories(session: SessionDep, user_id: UserIdDep) -> list[RepositoryResponse]:
    repositories = await list_connected_repositories(session, user_id)
    return [RepositoryResponse.from_model(r) for r in repositories]


@router.get("/github", response_model=list[GitHubRepoResponse])
async def fetch_from_github(session: SessionDep, user_id: UserIdDep) -> list[GitHubRepoResponse]:
    repos = await fetch_github_repositories(session, user_id)
    return [GitHubRepoResponse.from_github(r) for r in repos]


@router.post("/connect", response_model=ConnectResponse)
async def connect(
    request: ConnectRequest, session: SessionDep, user_id: UserIdDep
) -> ConnectResponse:
    connected = await connect_repositories(
        session, user_id, [item.to_input() for item in request.repos]
    )
    return ConnectResponse(connected=connected)


@router.delete("/{repository_id}", response_model=DisconnectResponse)
async def disconnect(
    repository_id: str, session: SessionDep, user_id: UserIdDep
) -> DisconnectResponse:
    await disconnect_repository(session, user_id, repository_id)
    return DisconnectResponse(success=True)
