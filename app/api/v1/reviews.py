from fastapi import APIRouter, Query, Request

from app.api.deps import SessionDep, UserIdDep
from app.api.v1.schemas import ReviewResponse, TriggerReviewRequest, TriggerReviewResponse
from app.core.config import settings
from app.core.limiter import limiter
from app.core.logging import get_logger
from app.domain.review.service import (
    get_latest_review_for_pr,
    get_review,
    list_reviews,
    trigger_review,
)

router = APIRouter(prefix="/reviews", tags=["reviews"])
logger = get_logger(__name__)


@router.post("", response_model=TriggerReviewResponse, status_code=202)
@limiter.limit(settings.review_trigger_rate_limit)
async def trigger(
    request: Request,
    body: TriggerReviewRequest,
    session: SessionDep,
    user_id: UserIdDep,
) -> TriggerReviewResponse:
    review = await trigger_review(session, user_id, body.repository_id, body.pr_number)
    logger.info("리뷰 요청 접수 review_id=%s pr=%d", review.id, body.pr_number)
    return TriggerReviewResponse(review_id=review.id)


@router.get("", response_model=list[ReviewResponse])
async def list_user_reviews(
    session: SessionDep,
    user_id: UserIdDep,
    repository_id: str | None = Query(default=None, alias="repositoryId"),
    limit: int = Query(default=20, ge=1, le=50),
) -> list[ReviewResponse]:
    reviews = await list_reviews(session, user_id, repository_id=repository_id, limit=limit)
    return [ReviewResponse.from_model(r) for r in reviews]


@router.get("/latest", response_model=ReviewResponse | None)
async def get_latest_for_pr(
    session: SessionDep,
    user_id: UserIdDep,
    repository_id: str = Query(alias="repositoryId"),
    pr_number: int = Query(alias="prNumber", ge=1),
) -> ReviewResponse | None:
    review = await get_latest_review_for_pr(session, user_id, repository_id, pr_number)
    return ReviewResponse.from_model(review) if review else None


@router.get("/{review_id}", response_model=ReviewResponse)
async def get_review_detail(
    review_id: str, session: SessionDep, user_id: UserIdDep
) -> ReviewResponse:
    review = await get_review(session, user_id, review_id)
    return ReviewResponse.from_model(review)
