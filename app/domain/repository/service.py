import httpx
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    GitHubAPIError,
    GitHubNotConnectedError,
    InvalidRepositoryNameError,
    RepositoryNotFoundError,
)
from app.core.logging import get_logger
from app.domain.account.service import get_github_access_token
from app.domain.github.schemas import GitHubRepo
from app.domain.repository.schemas import ConnectRepositoryInput, RepositoryAccess
from app.infra.db.models import Repository, Review
from app.infra.github.client import list_user_repos, parse_full_name

logger = get_logger(__name__)


async def list_connected_repositories(session: AsyncSession, user_id: str) -> list[Repository]:
    """사용자가 연결한 레포지토리 목록, 최근 연결 순"""
    stmt = (
        select(Repository)
        .where(Repository.user_id == user_id)
        .order_by(Repository.created_at.desc())
    )
    return list((await session.execute(stmt)).scalars().all())


async def get_owned_repository(
    session: AsyncSession, user_id: str, repository_id: str
) -> Repository:
    """사용자 소유 레포지토리 조회

    Raises:
        RepositoryNotFoundError: 없거나 다른 사용자의 레포지토리인 경우
    """
    stmt = select(Repository).where(
        Repository.id == repository_id,
        Repository.user_id == user_id,
    )
    repository = (await session.execute(stmt)).scalar_one_or_none()
    if repository is None:
        raise RepositoryNotFoundError(detail=f"repository_id={repository_id}")
    return repository


async def require_github_token(session: AsyncSession, user_id: str) -> str:
    """GitHub 토큰 조회, 없으면 GitHubNotConnectedError"""
    access_token = await get_github_access_token(session, user_id)
    if not access_token:
        raise GitHubNotConnectedError()
    return access_token


async def resolve_repository_access(
    session: AsyncSession, user_id: str, repository_id: str
) -> RepositoryAccess:
    """소유권, 토큰, owner/repo 이름을 순서대로 검증

    Raises:
        RepositoryNotFoundError: 레포지토리가 없거나 소유자가 아닌 경우
        GitHubNotConnectedError: GitHub 토큰이 없는 경우
        InvalidRepositoryNameError: full_name이 owner/repo 형식이 아닌 경우
    """
    repository = await get_owned_repository(session, user_id, repository_id)
    access_token = await require_github_token(session, user_id)

    try:
        owner, repo = parse_full_name(repository.full_name)
    except ValueError as e:
        raise InvalidRepositoryNameError(detail=str(e)) from e

    return RepositoryAccess(
        repository=repository,
        access_token=access_token,
        owner=owner,
        repo=repo,
    )


async def fetch_github_repositories(session: AsyncSession, user_id: str) -> list[GitHubRepo]:
    """GitHub에서 사용자가 접근 가능한 레포지토리 전체 조회"""
    access_token = await require_github_token(session, user_id)

    try:
        return await list_user_repos(access_token)
    except httpx.HTTPStatusError as e:
        logger.error("GitHub 레포지토리 조회 실패 status=%d", e.response.status_code)
        raise GitHubAPIError.from_http_error(e) from e
    except httpx.RequestError as e:
        logger.error("GitHub 요청 실패 error=%s", type(e).__name__)
        raise GitHubAPIError.from_request_error(e) from e


async def connect_repositories(
    session: AsyncSession, user_id: str, repos: list[ConnectRepositoryInput]
) -> int:
    """선택한 레포지토리 연결, 이미 연결된 레포는 정보 갱신

    Returns:
        연결(생성 또는 갱신)된 레포지토리 수
    """
    for item in repos:
        stmt = select(Repository).where(
            Repository.user_id == user_id,
            Repository.github_id == item.github_id,
        )
        repository = (await session.execute(stmt)).scalar_one_or_none()

        if repository is None:
            session.add(
                Repository(
                    user_id=user_id,
                    github_id=item.github_id,
                    name=item.name,
                    full_name=item.full_name,
                    private=item.private,
                    html_url=item.html_url,
                )
            )
        else:
            repository.name = item.name
            repository.full_name = item.full_name
            repository.private = item.private
            repository.html_url = item.html_url

    await session.flush()
    logger.info("레포지토리 연결 완료 count=%d", len(repos))
    return len(repos)


async def disconnect_repository(session: AsyncSession, user_id: str, repository_id: str) -> None:
    """레포지토리 연결 해제, 해당 레포의 리뷰도 함께 삭제"""
    repository = await get_owned_repository(session, user_id, repository_id)

    await session.execute(delete(Review).where(Review.repository_id == repository.id))
    await session.delete(repository)
    await session.flush()

    logger.info("레포지토리 연결 해제 repo=%s", repository.full_name)
