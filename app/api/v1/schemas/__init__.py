from app.api.v1.schemas.account import AccountResponse, LinkGitHubRequest
from app.api.v1.schemas.pull_request import (
    PRAuthorResponse,
    PullRequestDetailResponse,
    PullRequestFileResponse,
    PullRequestResponse,
)
from app.api.v1.schemas.repository import (
    ConnectRepositoryItem,
    ConnectRequest,
    ConnectResponse,
    DisconnectResponse,
    GitHubRepoResponse,
    RepositoryResponse,
)
from app.api.v1.schemas.review import (
    ReviewBrief,
    ReviewCommentResponse,
    ReviewResponse,
    TriggerReviewRequest,
    TriggerReviewResponse,
)

__all__ = [
    "AccountResponse",
    "LinkGitHubRequest",
    "PRAuthorResponse",
    "PullRequestResponse",
    "PullRequestDetailResponse",
    "PullRequestFileResponse",
    "RepositoryResponse",
    "GitHubRepoResponse",
    "ConnectRepositoryItem",
    "ConnectRequest",
    "ConnectResponse",
    "DisconnectResponse",
    "ReviewBrief",
    "ReviewCommentResponse",
    "ReviewResponse",
    "TriggerReviewRequest",
    "TriggerReviewResponse",
]
