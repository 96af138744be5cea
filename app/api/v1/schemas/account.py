"""계정 연결 API 스키마."""

from pydantic import BaseModel, Field


class LinkGitHubRequest(BaseModel):
    """GitHub 토큰 연결 요청."""

    access_token: str = Field(alias="accessToken", min_length=1)

    class Config:
        populate_by_name = True


class AccountResponse(BaseModel):
    """계정 연결 상태."""

    provider: str
    linked: bool
