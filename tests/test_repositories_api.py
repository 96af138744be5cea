"""레포지토리 API 테스트"""

from unittest.mock import AsyncMock, patch

import httpx
import pytest
from sqlalchemy import func, select

from app.domain.github.schemas import GitHubRepo
from app.infra.db.database import session_scope
from app.infra.db.models import Repository, Review
from conftest import OTHER_USER_ID


def _connect_item(github_id: int, full_name: str, private: bool = False) -> dict:
    return {
        "githubId": github_id,
        "name": full_name.split("/")[-1],
        "fullName": full_name,
        "private": private,
        "htmlUrl": f"https://github.com/{full_name}",
    }


class TestAuthentication:
    """X-User-ID 헤더 검증"""

    @pytest.mark.asyncio
    async def test_missing_header_returns_401(self, async_client):
        """헤더가 없으면 401"""
        response = await async_client.get(
            "/api/v1/repositories", headers={"X-User-ID": ""}
        )

        assert response.status_code == 401
        assert response.json()["error_code"] == "UNAUTHORIZED"


class TestListRepositories:
    """GET /api/v1/repositories"""

    @pytest.mark.asyncio
    async def test_only_own_repositories(self, async_client, repository, other_user_repository):
        """다른 사용자의 레포지토리는 보이지 않음"""
        response = await async_client.get("/api/v1/repositories")

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["id"] == repository.id
        assert data[0]["fullName"] == "octocat/hello-world"
        assert data[0]["githubId"] == 1001


class TestFetchGitHubRepositories:
    """GET /api/v1/repositories/github"""

    @pytest.mark.asyncio
    async def test_without_token_returns_412(self, async_client):
        """GitHub 계정 미연결 시 412"""
        response = await async_client.get("/api/v1/repositories/github")

        assert response.status_code == 412
        assert response.json()["error_code"] == "GITHUB_NOT_CONNECTED"

    @pytest.mark.asyncio
    async def test_returns_github_repos(self, async_client, github_account):
        """연결된 토큰으로 GitHub 레포 조회"""
        repos = [
            GitHubRepo(
                id=42,
                name="hello-world",
                full_name="octocat/hello-world",
                private=False,
                html_url="https://github.com/octocat/hello-world",
                language="Python",
                stargazers_count=10,
            )
        ]

        with patch(
            "app.domain.repository.service.list_user_repos",
            new_callable=AsyncMock,
            return_value=repos,
        ) as mock_list:
            response = await async_client.get("/api/v1/repositories/github")

        assert response.status_code == 200
        mock_list.assert_awaited_once_with(github_account)
        assert response.json()[0]["githubId"] == 42
        assert response.json()[0]["stars"] == 10

    @pytest.mark.asyncio
    async def test_github_unauthorized(self, async_client, github_account, create_http_error):
        """만료된 토큰은 401 GITHUB_UNAUTHORIZED"""
        with patch(
            "app.domain.repository.service.list_user_repos",
            new_callable=AsyncMock,
            side_effect=create_http_error(401),
        ):
            response = await async_client.get("/api/v1/repositories/github")

        assert response.status_code == 401
        assert response.json()["error_code"] == "GITHUB_UNAUTHORIZED"

    @pytest.mark.asyncio
    async def test_github_server_error(self, async_client, github_account, create_http_error):
        """그 밖의 GitHub 오류는 502"""
        with patch(
            "app.domain.repository.service.list_user_repos",
            new_callable=AsyncMock,
            side_effect=create_http_error(500),
        ):
            response = await async_client.get("/api/v1/repositories/github")

        assert response.status_code == 502
        assert response.json()["error_code"] == "GITHUB_API_ERROR"

    @pytest.mark.asyncio
    async def test_github_connection_error(self, async_client, github_account):
        """GitHub 연결 실패도 502로 응답"""
        with patch(
            "app.domain.repository.service.list_user_repos",
            new_callable=AsyncMock,
            side_effect=httpx.ConnectError("connection refused"),
        ):
            response = await async_client.get("/api/v1/repositories/github")

        assert response.status_code == 502
        assert response.json()["error_code"] == "GITHUB_API_ERROR"


class TestConnectRepositories:
    """POST /api/v1/repositories/connect"""

    @pytest.mark.asyncio
    async def test_connect_is_idempotent(self, async_client):
        """같은 레포를 다시 연결하면 갱신만 하고 중복 생성하지 않음"""
        body = {"repos": [_connect_item(1, "octocat/a"), _connect_item(2, "octocat/b")]}

        first = await async_client.post("/api/v1/repositories/connect", json=body)
        body["repos"][0]["private"] = True
        second = await async_client.post("/api/v1/repositories/connect", json=body)

        assert first.json() == {"connected": 2}
        assert second.json() == {"connected": 2}

        listed = (await async_client.get("/api/v1/repositories")).json()
        assert len(listed) == 2
        assert {r["fullName"]: r["private"] for r in listed}["octocat/a"] is True

    @pytest.mark.asyncio
    async def test_same_github_repo_per_user(self, async_client, other_user_repository):
        """다른 사용자가 연결한 레포도 별도로 연결"""
        body = {"repos": [_connect_item(other_user_repository.github_id, "someone/private-repo")]}

        response = await async_client.post("/api/v1/repositories/connect", json=body)

        assert response.status_code == 200
        async with session_scope() as session:
            count = await session.scalar(select(func.count()).select_from(Repository))
            other = await session.get(Repository, other_user_repository.id)
        assert count == 2
        assert other.user_id == OTHER_USER_ID

    @pytest.mark.asyncio
    async def test_invalid_body(self, async_client):
        """필수 필드 누락은 422"""
        response = await async_client.post(
            "/api/v1/repositories/connect", json={"repos": [{"githubId": 1}]}
        )

        assert response.status_code == 422


class TestDisconnectRepository:
    """DELETE /api/v1/repositories/{repository_id}"""

    @pytest.mark.asyncio
    async def test_disconnect_removes_reviews(self, async_client, repository, pending_review):
        """연결 해제 시 리뷰도 함께 삭제"""
        response = await async_client.delete(f"/api/v1/repositories/{repository.id}")

        assert response.status_code == 200
        assert response.json() == {"success": True}
        async with session_scope() as session:
            assert await session.get(Repository, repository.id) is None
            assert await session.get(Review, pending_review.id) is None

    @pytest.mark.asyncio
    async def test_other_users_repository(self, async_client, other_user_repository):
        """다른 사용자의 레포지토리는 404"""
        response = await async_client.delete(f"/api/v1/repositories/{other_user_repository.id}")

        assert response.status_code == 404
        assert response.json()["error_code"] == "REPOSITORY_NOT_FOUND"
        async with session_scope() as session:
            assert await session.get(Repository, other_user_repository.id) is not None
