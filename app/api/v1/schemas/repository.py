"""레포지토리 API 스키마."""

from datetime import datetime

from pydantic import BaseModel, Field

from app.domain.github.schemas import GitHubRepo
from app.domain.repository.schemas import ConnectRepositoryInput
from app.infra.db.models import Repository


class RepositoryResponse(BaseModel):
    """연결된 레포지토리."""

    id: str
    github_id: int = Field(alias="githubId")
    name: str
    full_name: str = Field(alias="fullName")
    private: bool
    html_url: str = Field(alias="htmlUrl")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    class Config:
        populate_by_name = True

    @classmethod
    def from_model(cls, repository: Repository) -> "RepositoryResponse":
        return cls(
            id=repository.id,
            github_id=repository.github_id,
            name=repository.name,
            full_name=repository.full_name,
            private=repository.private,
            html_url=repository.html_url,
            created_at=repository.created_at,
            updated_at=repository.updated_at,
        )


class GitHubRepoResponse(BaseModel):
    """GitHub에서 조회한 레포지토리."""

    github_id: int = Field(alias="githubId")
    name: str
    full_name: str = Field(alias="fullName")
    private: bool
    html_url: str = Field(alias="htmlUrl")
    description: str | None = None
    language: str | None = None
    stars: int = 0
    updated_at: str | None = Field(default=None, alias="updatedAt")

    class Config:
        populate_by_name = True

    @classmethod
    def from_github(cls, repo: GitHubRepo) -> "GitHubRepoResponse":
        return cls(
            github_id=repo.id,
            name=repo.name,
            full_name=repo.full_name,
            private=repo.private,
            html_url=repo.html_url,
            description=repo.description,
            language=repo.language,
            stars=repo.stargazers_count,
            updated_at=repo.updated_at,
        )


class ConnectRepositoryItem(BaseModel):
    """연결 요청 항목."""

    github_id: int = Field(alias="githubId")
    name: str = Field(min_length=1)
    full_name: str = Field(alias="fullName", min_length=1)
    private: bool
    html_url: str = Field(alias="htmlUrl")

    class Config:
        populate_by_name = True

    def to_input(self) -> ConnectRepositoryInput:
        return ConnectRepositoryInput(
            github_id=self.github_id,
            name=self.name,
            full_name=self.full_name,
            private=self.private,
            html_url=self.html_url,
        )


class ConnectRequest(BaseModel):
    """레포지토리 연결 요청."""

    repos: list[ConnectRepositoryItem]


class ConnectResponse(BaseModel):
    """레포지토리 연결 응답."""

    connected: int


class DisconnectResponse(BaseModel):
    """레포지토리 연결 해제 응답."""

    success: bool
