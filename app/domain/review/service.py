import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import GitHubAPIError, ReviewNotFoundError
from app.core.logging import get_logger
from app.domain.repository.service import resolve_repository_access
from app.domain.review import store
from app.domain.review.jobs import enqueue_review_job
from app.domain.review.schemas import ReviewRequestedEvent
from app.infra.db.models import Review
from app.infra.github.client import get_pull_request

logger = get_logger(__name__)


async def trigger_review(
    session: AsyncSession,
    user_id: str,
    repository_id: str,
    pr_number: int,
) -> Review:
    """PR 리뷰 요청

    PENDING 리뷰를 커밋한 뒤에 백그라운드 작업을 등록한다.
    같은 PR을 다시 요청하면 별도의 리뷰가 생성된다.
    """
    access = await resolve_repository_access(session, user_id, repository_id)

    try:
        pull_request = await get_pull_request(
            access.owner, access.repo, pr_number, access.access_token
        )
    except httpx.HTTPStatusError as e:
        logger.error("리뷰 요청 PR 조회 실패 pr=%d status=%d", pr_number, e.response.status_code)
        raise GitHubAPIError.from_http_error(e) from e
    except httpx.RequestError as e:
        logger.error("GitHub 요청 실패 error=%s", type(e).__name__)
        raise GitHubAPIError.from_request_error(e) from e

    review = await store.create_review(
        session,
        repository_id=access.repository.id,
        user_id=user_id,
        pr_number=pull_request.number,
        pr_title=pull_request.title,
        pr_url=pull_request.html_url,
    )
    await session.commit()

    enqueue_review_job(
        ReviewRequestedEvent(
            review_id=review.id,
            repository_id=access.repository.id,
            pr_number=pull_request.number,
            user_id=user_id,
        )
    )
    return review


async def get_review(session: AsyncSession, user_id: str, review_id: str) -> Review:
    """사용자 소유 리뷰 조회

    Raises:
        ReviewNotFoundError: 없거나 다른 사용자의 리뷰인 경우
    """
    review = await store.get_review(session, review_id, user_id=user_id)
    if review is None:
        raise ReviewNotFoundError(detail=f"review_id={review_id}")
    return review


async def list_reviews(
    session: AsyncSession,
    user_id: str,
    repository_id: str | None = None,
    limit: int = 20,
) -> list[Review]:
    return await store.list_reviews(session, user_id, repository_id=repository_id, limit=limit)


async def get_latest_review_for_pr(
    session: AsyncSession,
    user_id: str,
    repository_id: str,
    pr_number: int,
) -> Review | None:
    return await store.get_latest_review(session, user_id, repository_id, pr_number)
