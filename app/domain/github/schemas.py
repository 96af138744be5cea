from typing import Literal

from pydantic import BaseModel


class GitHubRepo(BaseModel):
    """GitHub 레포지토리 정보"""

    id: int
    name: str
    full_name: str
    private: bool
    html_url: str
    description: str | None = None
    language: str | None = None
    stargazers_count: int = 0
    updated_at: str | None = None


class PRAuthor(BaseModel):
    """PR 작성자"""

    login: str
    avatar_url: str | None = None


class PullRequest(BaseModel):
    """PR 상세 정보, 항상 GitHub에서 실시간 조회"""

    id: int
    number: int
    title: str
    state: Literal["open", "closed"]
    draft: bool = False
    html_url: str
    author: PRAuthor
    head_ref: str
    head_sha: str
    base_ref: str
    additions: int = 0
    deletions: int = 0
    changed_files: int = 0
    created_at: str | None = None
    updated_at: str | None = None
    merged_at: str | None = None

    @property
    def merged(self) -> bool:
        return self.merged_at is not None


FileStatus = Literal["added", "removed", "modified", "renamed", "copied", "changed", "unchanged"]


class PullRequestFile(BaseModel):
    """PR 변경 파일"""

    sha: str | None = None
    filename: str
    status: FileStatus
    additions: int = 0
    deletions: int = 0
    changes: int = 0
    patch: str | None = None
    previous_filename: str | None = None
