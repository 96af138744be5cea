"""테스트 공통 fixture"""

from unittest.mock import MagicMock

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from app.core.limiter import limiter
from app.domain.account.service import link_github_account
from app.domain.github.schemas import PRAuthor, PullRequest, PullRequestFile
from app.domain.review.schemas import ReviewComment, ReviewRequestedEvent, ReviewResult
from app.domain.review.store import create_review
from app.infra.db.database import close_db, init_db, session_scope
from app.infra.db.models import Repository
from app.infra.llm.factory import reset_clients
from app.main import app

TEST_USER_ID = "user-1"
OTHER_USER_ID = "user-2"
TEST_TOKEN = "gho_testtoken123"


@pytest.fixture(autouse=True)
def disable_rate_limit(monkeypatch):
    """요청 제한 비활성화"""
    monkeypatch.setattr(limiter, "enabled", False)


@pytest.fixture(autouse=True)
def reset_llm_clients():
    """LLM 클라이언트 캐시 초기화"""
    reset_clients()
    yield
    reset_clients()


@pytest.fixture
async def db():
    """테스트별 인메모리 데이터베이스"""
    await init_db("sqlite+aiosqlite://")
    yield
    await close_db()


@pytest.fixture
async def async_client(db):
    """X-User-ID가 설정된 비동기 HTTP 클라이언트"""
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={"X-User-ID": TEST_USER_ID},
    ) as client:
        yield client


@pytest.fixture
async def github_account(db) -> str:
    """테스트 사용자 GitHub 토큰 연결"""
    async with session_scope() as session:
        await link_github_account(session, TEST_USER_ID, TEST_TOKEN)
    return TEST_TOKEN


async def _create_repository(user_id: str, github_id: int, full_name: str) -> Repository:
    async with session_scope() as session:
        repository = Repository(
            user_id=user_id,
            github_id=github_id,
            name=full_name.split("/")[-1],
            full_name=full_name,
            private=False,
            html_url=f"https://github.com/{full_name}",
        )
        session.add(repository)
        await session.flush()
    return repository


@pytest.fixture
async def repository(db) -> Repository:
    """테스트 사용자가 연결한 레포지토리"""
    return await _create_repository(TEST_USER_ID, 1001, "octocat/hello-world")


@pytest.fixture
async def other_user_repository(db) -> Repository:
    """다른 사용자가 연결한 레포지토리"""
    return await _create_repository(OTHER_USER_ID, 2002, "someone/private-repo")


@pytest.fixture
async def pending_review(repository):
    """PENDING 상태 리뷰"""
    async with session_scope() as session:
        review = await create_review(
            session,
            repository_id=repository.id,
            user_id=TEST_USER_ID,
            pr_number=7,
            pr_title="Add login",
            pr_url="https://github.com/octocat/hello-world/pull/7",
        )
    return review


@pytest.fixture
def review_event(pending_review, repository) -> ReviewRequestedEvent:
    """리뷰 작업 이벤트"""
    return ReviewRequestedEvent(
        review_id=pending_review.id,
        repository_id=repository.id,
        pr_number=7,
        user_id=TEST_USER_ID,
    )


def _make_pr_payload(number: int = 7, title: str = "Add login", **overrides) -> dict:
    payload = {
        "id": 9000 + number,
        "number": number,
        "title": title,
        "state": "open",
        "draft": False,
        "html_url": f"https://github.com/octocat/hello-world/pull/{number}",
        "user": {"login": "octocat", "avatar_url": "https://avatars.example/octocat"},
        "head": {"ref": "feature/login", "sha": "abc123"},
        "base": {"ref": "main"},
        "additions": 12,
        "deletions": 3,
        "changed_files": 2,
        "created_at": "2024-01-01T00:00:00Z",
        "updated_at": "2024-01-02T00:00:00Z",
        "merged_at": None,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def pr_payload():
    """GitHub PR API 응답 형태의 딕셔너리 생성"""
    return _make_pr_payload


@pytest.fixture
def sample_pull_request() -> PullRequest:
    """테스트용 PR"""
    return PullRequest(
        id=9007,
        number=7,
        title="Add login",
        state="open",
        draft=False,
        html_url="https://github.com/octocat/hello-world/pull/7",
        author=PRAuthor(login="octocat", avatar_url="https://avatars.example/octocat"),
        head_ref="feature/login",
        head_sha="abc123",
        base_ref="main",
        additions=12,
        deletions=3,
        changed_files=2,
    )


@pytest.fixture
def sample_files() -> list[PullRequestFile]:
    """테스트용 PR 파일 목록, 바이너리 파일 포함"""
    return [
        PullRequestFile(
            sha="f1",
            filename="src/auth.py",
            status="modified",
            additions=10,
            deletions=2,
            changes=12,
            patch="@@ -1,3 +1,4 @@\n+password = request.args['pw']",
        ),
        PullRequestFile(
            sha="f2",
            filename="assets/logo.png",
            status="added",
            additions=0,
            deletions=0,
            changes=0,
            patch=None,
        ),
    ]


@pytest.fixture
def sample_review_result() -> ReviewResult:
    """테스트용 리뷰 결과"""
    return ReviewResult(
        summary="Adds a login handler that reads the password from the query string.",
        risk_score=72,
        comments=[
            ReviewComment(
                file="src/auth.py",
                line=1,
                severity="critical",
                category="security",
                message="Password is read from query parameters.",
                suggestion="Read credentials from the request body.",
            )
        ],
    )


@pytest.fixture
def mock_github_response():
    """GitHub API 응답 mock 생성"""

    def _create(json_data):
        mock = MagicMock()
        mock.json.return_value = json_data
        mock.raise_for_status = MagicMock()
        return mock

    return _create


@pytest.fixture
def create_http_error():
    """HTTPStatusError 생성 helper"""

    def _create(status_code: int, message: str = "Error"):
        request = httpx.Request("GET", "https://api.github.com/test")
        return httpx.HTTPStatusError(
            message,
            request=request,
            response=httpx.Response(status_code, request=request),
        )

    return _create
