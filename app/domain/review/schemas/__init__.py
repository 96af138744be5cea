from app.domain.review.schemas.base import (
    ALLOWED_TRANSITIONS,
    Category,
    ReviewComment,
    ReviewRequestedEvent,
    ReviewResult,
    ReviewState,
    ReviewStatus,
    Severity,
)

__all__ = [
    "ALLOWED_TRANSITIONS",
    "Category",
    "Severity",
    "ReviewStatus",
    "ReviewComment",
    "ReviewResult",
    "ReviewRequestedEvent",
    "ReviewState",
]
