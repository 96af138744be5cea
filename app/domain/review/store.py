"""리뷰 레코드 저장소

상태 변경은 모두 transition_review()를 거쳐 앞으로만 진행된다.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.domain.review.schemas import ReviewResult, ReviewStatus
from app.infra.db.models import Review

logger = get_logger(__name__)


class ReviewStatusError(ValueError):
    """허용되지 않은 리뷰 상태 전이"""

    def __init__(self, review_id: str, current: ReviewStatus, target: ReviewStatus):
        self.review_id = review_id
        self.current = current
        self.target = target
        super().__init__(f"리뷰 상태 전이 불가 review_id={review_id} {current.value} -> {target.value}")


async def create_review(
    session: AsyncSession,
    repository_id: str,
    user_id: str,
    pr_number: int,
    pr_title: str | None = None,
    pr_url: str | None = None,
) -> Review:
    """PENDING 상태 리뷰 생성"""
    review = Review(
        repository_id=repository_id,
        user_id=user_id,
        pr_number=pr_number,
        pr_title=pr_title,
        pr_url=pr_url,
        status=ReviewStatus.PENDING.value,
        comments=[],
    )
    session.add(review)
    await session.flush()

    logger.info("리뷰 생성 review_id=%s pr=%d", review.id, pr_number)
    return review


async def get_review(session: AsyncSession, review_id: str, user_id: str | None = None) -> Review | None:
    """리뷰 조회, user_id가 주어지면 소유자 일치 시에만 반환"""
    stmt = select(Review).where(Review.id == review_id)
    if user_id is not None:
        stmt = stmt.where(Review.user_id == user_id)
    return (await session.execute(stmt)).scalar_one_or_none()


async def list_reviews(
    session: AsyncSession,
    user_id: str,
    repository_id: str | None = None,
    limit: int = 20,
) -> list[Review]:
    """사용자 리뷰 목록, 최신순"""
    stmt = select(Review).where(Review.user_id == user_id)
    if repository_id:
        stmt = stmt.where(Review.repository_id == repository_id)
    stmt = stmt.order_by(Review.created_at.desc()).limit(limit)
    return list((await session.execute(stmt)).scalars().all())


async def get_latest_review(
    session: AsyncSession,
    user_id: str,
    repository_id: str,
    pr_number: int,
) -> Review | None:
    """PR의 가장 최근 리뷰"""
    stmt = (
        select(Review)
        .where(
            Review.user_id == user_id,
            Review.repository_id == repository_id,
            Review.pr_number == pr_number,
        )
        .order_by(Review.created_at.desc())
        .limit(1)
    )
    return (await session.execute(stmt)).scalar_one_or_none()


async def latest_reviews_by_pr(
    session: AsyncSession,
    repository_id: str,
    pr_numbers: list[int],
) -> dict[int, Review]:
    """PR 번호별 가장 최근 리뷰 매핑"""
    if not pr_numbers:
        return {}

    stmt = (
        select(Review)
        .where(Review.repository_id == repository_id, Review.pr_number.in_(pr_numbers))
        .order_by(Review.created_at.desc())
    )
    latest: dict[int, Review] = {}
    for review in (await session.execute(stmt)).scalars():
        latest.setdefault(review.pr_number, review)
    return latest


async def transition_review(
    session: AsyncSession,
    review_id: str,
    status: ReviewStatus,
    **fields,
) -> Review | None:
    """리뷰 상태 변경

    Returns:
        변경된 리뷰, 레코드가 없으면 None

    Raises:
        ReviewStatusError: 종료 상태이거나 뒤로 가는 전이인 경우
    """
    review = await get_review(session, review_id)
    if review is None:
        logger.warning("상태 변경 대상 리뷰 없음 review_id=%s", review_id)
        return None

    current = ReviewStatus(review.status)
    if not current.can_transition_to(status):
        raise ReviewStatusError(review_id, current, status)

    review.status = status.value
    for key, value in fields.items():
        setattr(review, key, value)
    await session.flush()

    logger.info("리뷰 상태 변경 review_id=%s %s -> %s", review_id, current.value, status.value)
    return review


async def complete_review(session: AsyncSession, review_id: str, result: ReviewResult) -> Review | None:
    """리뷰 결과 저장 후 COMPLETED"""
    return await transition_review(
        session,
        review_id,
        ReviewStatus.COMPLETED,
        summary=result.summary,
        risk_score=result.risk_score,
        comments=[comment.model_dump() for comment in result.comments],
        error=None,
    )


async def fail_review(session: AsyncSession, review_id: str, reason: str) -> Review | None:
    """실패 사유 저장 후 FAILED"""
    return await transition_review(session, review_id, ReviewStatus.FAILED, error=reason)
