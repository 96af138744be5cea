from dataclasses import dataclass

from pydantic import BaseModel

from app.infra.db.models import Repository


class ConnectRepositoryInput(BaseModel):
    """연결할 레포지토리 정보"""

    github_id: int
    name: str
    full_name: str
    private: bool
    html_url: str


@dataclass(frozen=True)
class RepositoryAccess:
    """GitHub 호출에 필요한 레포지토리 접근 정보"""

    repository: Repository
    access_token: str
    owner: str
    repo: str
