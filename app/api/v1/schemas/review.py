"""리뷰 API 스키마."""

from datetime import datetime

from pydantic import BaseModel, Field

from app.api.v1.schemas.repository import RepositoryResponse
from app.domain.review.schemas import Category, ReviewStatus, Severity
from app.infra.db.models import Review


class TriggerReviewRequest(BaseModel):
    """리뷰 요청."""

    repository_id: str = Field(alias="repositoryId", min_length=1)
    pr_number: int = Field(alias="prNumber", ge=1)

    class Config:
        populate_by_name = True


class TriggerReviewResponse(BaseModel):
    """리뷰 요청 응답."""

    review_id: str = Field(alias="reviewId")

    class Config:
        populate_by_name = True


class ReviewCommentResponse(BaseModel):
    """리뷰 코멘트."""

    file: str
    line: int
    severity: Severity
    category: Category
    message: str
    suggestion: str | None = None


class ReviewBrief(BaseModel):
    """PR 목록에 붙는 최신 리뷰 요약."""

    id: str
    status: ReviewStatus
    created_at: datetime = Field(alias="createdAt")

    class Config:
        populate_by_name = True

    @classmethod
    def from_model(cls, review: Review) -> "ReviewBrief":
        return cls(id=review.id, status=ReviewStatus(review.status), created_at=review.created_at)


class ReviewResponse(BaseModel):
    """리뷰 상세."""

    id: str
    repository_id: str = Field(alias="repositoryId")
    user_id: str = Field(alias="userId")
    pr_number: int = Field(alias="prNumber")
    pr_title: str | None = Field(default=None, alias="prTitle")
    pr_url: str | None = Field(default=None, alias="prUrl")
    status: ReviewStatus
    summary: str | None = None
    risk_score: float | None = Field(default=None, alias="riskScore")
    comments: list[ReviewCommentResponse] = []
    error: str | None = None
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
    repository: RepositoryResponse | None = None

    class Config:
        populate_by_name = True

    @classmethod
    def from_model(cls, review: Review, include_repository: bool = True) -> "ReviewResponse":
        repository = None
        if include_repository and review.repository is not None:
            repository = RepositoryResponse.from_model(review.repository)

        return cls(
            id=review.id,
            repository_id=review.repository_id,
            user_id=review.user_id,
            pr_number=review.pr_number,
            pr_title=review.pr_title,
            pr_url=review.pr_url,
            status=ReviewStatus(review.status),
            summary=review.summary,
            risk_score=review.risk_score,
            comments=[ReviewCommentResponse(**c) for c in review.comments or []],
            error=review.error,
            created_at=review.created_at,
            updated_at=review.updated_at,
            repository=repository,
        )
