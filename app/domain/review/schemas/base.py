from enum import Enum
from typing import Literal, TypedDict

from pydantic import BaseModel, Field

from app.domain.github.schemas import PullRequest, PullRequestFile


class ReviewStatus(str, Enum):
    """리뷰 상태, 앞으로만 진행"""

    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in (ReviewStatus.COMPLETED, ReviewStatus.FAILED)

    def can_transition_to(self, target: "ReviewStatus") -> bool:
        return target in ALLOWED_TRANSITIONS[self]


ALLOWED_TRANSITIONS: dict[ReviewStatus, frozenset[ReviewStatus]] = {
    ReviewStatus.PENDING: frozenset({ReviewStatus.PROCESSING, ReviewStatus.FAILED}),
    # 재시도된 작업은 PROCESSING 단계부터 다시 시작
    ReviewStatus.PROCESSING: frozenset(
        {ReviewStatus.PROCESSING, ReviewStatus.COMPLETED, ReviewStatus.FAILED}
    ),
    ReviewStatus.COMPLETED: frozenset(),
    ReviewStatus.FAILED: frozenset(),
}

Severity = Literal["critical", "high", "medium", "low"]
Category = Literal["bug", "security", "performance", "style", "suggestion"]


class ReviewComment(BaseModel):
    """리뷰 코멘트"""

    file: str
    line: int
    severity: Severity
    category: Category
    message: str
    suggestion: str | None = None


class ReviewResult(BaseModel):
    """AI 리뷰 LLM 출력"""

    summary: str
    risk_score: float = Field(alias="riskScore", ge=0, le=100)
    comments: list[ReviewComment]

    class Config:
        populate_by_name = True


class ReviewRequestedEvent(BaseModel):
    """리뷰 작업 트리거 이벤트"""

    review_id: str
    repository_id: str
    pr_number: int
    user_id: str


class ReviewState(TypedDict, total=False):
    """LangGraph 리뷰 작업 상태"""

    event: ReviewRequestedEvent
    full_name: str
    access_token: str
    owner: str
    repo: str
    pull_request: PullRequest
    files: list[PullRequestFile]
    result: ReviewResult
    error_message: str
