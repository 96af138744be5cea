"""PR API 스키마."""

from pydantic import BaseModel, Field

from app.api.v1.schemas.review import ReviewBrief, ReviewResponse
from app.domain.github.schemas import FileStatus, PullRequest, PullRequestFile
from app.domain.pull_request.service import PullRequestWithReview


class PRAuthorResponse(BaseModel):
    """PR 작성자."""

    login: str
    avatar_url: str | None = Field(default=None, alias="avatarUrl")

    class Config:
        populate_by_name = True


class PullRequestResponse(BaseModel):
    """PR 정보."""

    id: int
    number: int
    title: str
    state: str
    draft: bool
    merged: bool
    html_url: str = Field(alias="htmlUrl")
    author: PRAuthorResponse
    head_ref: str = Field(alias="headRef")
    base_ref: str = Field(alias="baseRef")
    additions: int
    deletions: int
    changed_files: int = Field(alias="changedFiles")
    created_at: str | None = Field(default=None, alias="createdAt")
    updated_at: str | None = Field(default=None, alias="updatedAt")
    merged_at: str | None = Field(default=None, alias="mergedAt")
    review: ReviewBrief | None = None

    class Config:
        populate_by_name = True

    @staticmethod
    def _fields(pr: PullRequest) -> dict:
        return {
            "id": pr.id,
            "number": pr.number,
            "title": pr.title,
            "state": pr.state,
            "draft": pr.draft,
            "merged": pr.merged,
            "html_url": pr.html_url,
            "author": PRAuthorResponse(login=pr.author.login, avatar_url=pr.author.avatar_url),
            "head_ref": pr.head_ref,
            "base_ref": pr.base_ref,
            "additions": pr.additions,
            "deletions": pr.deletions,
            "changed_files": pr.changed_files,
            "created_at": pr.created_at,
            "updated_at": pr.updated_at,
            "merged_at": pr.merged_at,
        }

    @classmethod
    def from_domain(cls, item: PullRequestWithReview) -> "PullRequestResponse":
        review = ReviewBrief.from_model(item.review) if item.review else None
        return cls(**cls._fields(item.pull_request), review=review)


class PullRequestDetailResponse(PullRequestResponse):
    """PR 상세, 최신 리뷰 전체 포함."""

    head_sha: str = Field(alias="headSha")
    review: ReviewResponse | None = None

    @classmethod
    def from_domain(cls, item: PullRequestWithReview) -> "PullRequestDetailResponse":
        review = (
            ReviewResponse.from_model(item.review, include_repository=False)
            if item.review
            else None
        )
        return cls(
            **cls._fields(item.pull_request),
            head_sha=item.pull_request.head_sha,
            review=review,
        )


class PullRequestFileResponse(BaseModel):
    """PR 변경 파일."""

    sha: str | None = None
    filename: str
    status: FileStatus
    additions: int
    deletions: int
    changes: int
    patch: str | None = None
    previous_filename: str | None = Field(default=None, alias="previousFilename")

    class Config:
        populate_by_name = True

    @classmethod
    def from_domain(cls, file: PullRequestFile) -> "PullRequestFileResponse":
        return cls(**file.model_dump())
