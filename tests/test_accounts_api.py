"""계정 연결 API 테스트"""

import pytest

from app.domain.account.service import get_github_access_token
from app.infra.db.database import session_scope
from conftest import TEST_USER_ID


class TestLinkGitHub:
    """PUT/DELETE /api/v1/accounts/github"""

    @pytest.mark.asyncio
    async def test_link_and_replace_token(self, async_client):
        """토큰 저장 후 다시 요청하면 교체"""
        first = await async_client.put(
            "/api/v1/accounts/github", json={"accessToken": "gho_first"}
        )
        second = await async_client.put(
            "/api/v1/accounts/github", json={"accessToken": "gho_second"}
        )

        assert first.status_code == 200
        assert second.json() == {"provider": "github", "linked": True}
        async with session_scope() as session:
            assert await get_github_access_token(session, TEST_USER_ID) == "gho_second"

    @pytest.mark.asyncio
    async def test_unlink(self, async_client, github_account):
        """연결 해제 시 토큰 삭제"""
        response = await async_client.delete("/api/v1/accounts/github")

        assert response.json() == {"provider": "github", "linked": False}
        async with session_scope() as session:
            assert await get_github_access_token(session, TEST_USER_ID) is None

    @pytest.mark.asyncio
    async def test_empty_token_rejected(self, async_client):
        """빈 토큰은 422"""
        response = await async_client.put("/api/v1/accounts/github", json={"accessToken": ""})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_requires_user(self, async_client):
        """X-User-ID 없이 요청하면 401"""
        response = await async_client.put(
            "/api/v1/accounts/github",
            json={"accessToken": "gho_x"},
            headers={"X-User-ID": "  "},
        )

        assert response.status_code == 401
