from dataclasses import dataclass

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import GitHubAPIError
from app.core.logging import get_logger
from app.domain.github.schemas import PullRequest, PullRequestFile
from app.domain.repository.service import resolve_repository_access
from app.domain.review.store import get_latest_review, latest_reviews_by_pr
from app.infra.db.models import Review
from app.infra.github.client import (
    get_pull_request,
    list_pull_request_files,
    list_pull_requests,
)

logger = get_logger(__name__)


@dataclass
class PullRequestWithReview:
    """GitHub PR과 로컬 최신 리뷰 결합"""

    pull_request: PullRequest
    review: Review | None


async def list_repository_pull_requests(
    session: AsyncSession,
    user_id: str,
    repository_id: str,
    state: str = "open",
) -> list[PullRequestWithReview]:
    """레포지토리 PR 목록과 PR별 최신 리뷰 상태"""
    access = await resolve_repository_access(session, user_id, repository_id)

    try:
        pulls = await list_pull_requests(access.owner, access.repo, access.access_token, state)
    except httpx.HTTPStatusError as e:
        logger.error("PR 목록 조회 실패 status=%d", e.response.status_code)
        raise GitHubAPIError.from_http_error(e) from e
    except httpx.RequestError as e:
        logger.error("GitHub 요청 실패 error=%s", type(e).__name__)
        raise GitHubAPIError.from_request_error(e) from e

    reviews = await latest_reviews_by_pr(
        session, access.repository.id, [pr.number for pr in pulls]
    )
    return [PullRequestWithReview(pull_request=pr, review=reviews.get(pr.number)) for pr in pulls]


async def get_repository_pull_request(
    session: AsyncSession,
    user_id: str,
    repository_id: str,
    pr_number: int,
) -> PullRequestWithReview:
    """PR 상세와 최신 리뷰"""
    access = await resolve_repository_access(session, user_id, repository_id)

    try:
        pull_request = await get_pull_request(
            access.owner, access.repo, pr_number, access.access_token
        )
    except httpx.HTTPStatusError as e:
        logger.error("PR 조회 실패 pr=%d status=%d", pr_number, e.response.status_code)
        raise GitHubAPIError.from_http_error(e) from e
    except httpx.RequestError as e:
        logger.error("GitHub 요청 실패 error=%s", type(e).__name__)
        raise GitHubAPIError.from_request_error(e) from e

    review = await get_latest_review(session, user_id, access.repository.id, pull_request.number)
    return PullRequestWithReview(pull_request=pull_request, review=review)


async def list_repository_pull_request_files(
    session: AsyncSession,
    user_id: str,
    repository_id: str,
    pr_number: int,
) -> list[PullRequestFile]:
    """PR 변경 파일 목록"""
    access = await resolve_repository_access(session, user_id, repository_id)

    try:
        return await list_pull_request_files(
            access.owner, access.repo, pr_number, access.access_token
        )
    except httpx.HTTPStatusError as e:
        logger.error("PR 파일 조회 실패 pr=%d status=%d", pr_number, e.response.status_code)
        raise GitHubAPIError.from_http_error(e) from e
    except httpx.RequestError as e:
        logger.error("GitHub 요청 실패 error=%s", type(e).__name__)
        raise GitHubAPIError.from_request_error(e) from e
