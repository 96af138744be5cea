"""리뷰 워크플로우 테스트"""

from unittest.mock import AsyncMock, patch

import httpx
import pytest
from sqlalchemy import update

from app.core.exceptions import ReviewValidationError
from app.domain.review import store
from app.domain.review.schemas import ReviewRequestedEvent, ReviewState
from app.domain.review.workflow import (
    INVALID_NAME_REASON,
    NO_REPOSITORY_REASON,
    NO_REVIEW_REASON,
    NO_TOKEN_REASON,
    check_error,
    create_review_workflow,
    parse_repository_name_node,
)
from app.infra.db.database import session_scope
from app.infra.db.models import Repository
from conftest import TEST_TOKEN, TEST_USER_ID


async def _load_review(review_id: str):
    async with session_scope() as session:
        return await store.get_review(session, review_id)


@pytest.fixture
def mock_github(sample_pull_request, sample_files):
    """워크플로우에서 사용하는 GitHub 호출 mock"""
    with (
        patch(
            "app.domain.review.workflow.list_pull_request_files",
            new_callable=AsyncMock,
            return_value=sample_files,
        ) as mock_files,
        patch(
            "app.domain.review.workflow.get_pull_request",
            new_callable=AsyncMock,
            return_value=sample_pull_request,
        ) as mock_pr,
    ):
        yield mock_files, mock_pr


class TestCheckError:
    """check_error 함수 테스트"""

    def test_continue_without_error(self):
        """에러가 없으면 continue"""
        assert check_error(ReviewState()) == "continue"

    def test_fail_with_error(self):
        """에러가 있으면 fail"""
        assert check_error(ReviewState(error_message="boom")) == "fail"


class TestParseRepositoryNameNode:
    """parse_repository_name_node 함수 테스트"""

    @pytest.mark.asyncio
    async def test_valid_name(self):
        """owner/repo 분리"""
        result = await parse_repository_name_node(ReviewState(full_name="octocat/hello-world"))

        assert result["owner"] == "octocat"
        assert result["repo"] == "hello-world"
        assert "error_message" not in result

    @pytest.mark.asyncio
    async def test_invalid_name(self):
        """형식이 잘못되면 실패 사유 설정"""
        result = await parse_repository_name_node(ReviewState(full_name="broken"))

        assert result["error_message"] == INVALID_NAME_REASON


class TestReviewWorkflow:
    """create_review_workflow 전체 실행 테스트"""

    @pytest.mark.asyncio
    async def test_success(
        self, review_event, github_account, mock_github, sample_review_result
    ):
        """정상 흐름: 파일, PR 조회 후 리뷰 저장하고 COMPLETED"""
        mock_files, mock_pr = mock_github

        with patch(
            "app.domain.review.workflow.review_code",
            new_callable=AsyncMock,
            return_value=sample_review_result,
        ) as mock_review:
            state = await create_review_workflow().ainvoke(ReviewState(event=review_event))

        assert state.get("error_message") is None
        mock_files.assert_awaited_once_with("octocat", "hello-world", 7, TEST_TOKEN)
        mock_pr.assert_awaited_once_with("octocat", "hello-world", 7, TEST_TOKEN)
        assert mock_review.call_args.kwargs["pr_title"] == "Add login"
        assert mock_review.call_args.kwargs["session_id"] == review_event.review_id

        review = await _load_review(review_event.review_id)
        assert review.status == "COMPLETED"
        assert 0 <= review.risk_score <= 100
        assert len(review.comments) == 1
        assert review.error is None

    @pytest.mark.asyncio
    async def test_missing_repository(self, pending_review, github_account, mock_github):
        """레포지토리가 삭제되었으면 FAILED, GitHub 호출 없음"""
        mock_files, _ = mock_github
        event = ReviewRequestedEvent(
            review_id=pending_review.id,
            repository_id="deleted-repo",
            pr_number=7,
            user_id=TEST_USER_ID,
        )

        state = await create_review_workflow().ainvoke(ReviewState(event=event))

        assert state["error_message"] == NO_REPOSITORY_REASON
        review = await _load_review(pending_review.id)
        assert review.status == "FAILED"
        assert review.error == "No repository found."
        mock_files.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_review(self, repository, github_account, mock_github):
        """리뷰가 삭제되었으면 GitHub, LLM 호출 없이 종료"""
        mock_files, mock_pr = mock_github
        event = ReviewRequestedEvent(
            review_id="deleted-review",
            repository_id=repository.id,
            pr_number=7,
            user_id=TEST_USER_ID,
        )

        with patch("app.domain.review.workflow.review_code", new_callable=AsyncMock) as mock_review:
            state = await create_review_workflow().ainvoke(ReviewState(event=event))

        assert state["error_message"] == NO_REVIEW_REASON
        mock_files.assert_not_called()
        mock_pr.assert_not_called()
        mock_review.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_token(self, review_event, mock_github):
        """GitHub 토큰이 없으면 FAILED"""
        mock_files, _ = mock_github

        await create_review_workflow().ainvoke(ReviewState(event=review_event))

        review = await _load_review(review_event.review_id)
        assert review.status == "FAILED"
        assert review.error == NO_TOKEN_REASON
        mock_files.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_repository_name(
        self, review_event, repository, github_account, mock_github
    ):
        """저장된 full_name이 잘못되면 FAILED"""
        async with session_scope() as session:
            await session.execute(
                update(Repository)
                .where(Repository.id == repository.id)
                .values(full_name="not-a-full-name")
            )

        await create_review_workflow().ainvoke(ReviewState(event=review_event))

        review = await _load_review(review_event.review_id)
        assert review.status == "FAILED"
        assert review.error == INVALID_NAME_REASON

    @pytest.mark.asyncio
    async def test_github_error_propagates(
        self, review_event, github_account, create_http_error
    ):
        """GitHub 오류는 예외로 전달되고 리뷰는 PROCESSING 유지"""
        with patch(
            "app.domain.review.workflow.list_pull_request_files",
            new_callable=AsyncMock,
            side_effect=create_http_error(502),
        ):
            with pytest.raises(httpx.HTTPStatusError):
                await create_review_workflow().ainvoke(ReviewState(event=review_event))

        review = await _load_review(review_event.review_id)
        assert review.status == "PROCESSING"

    @pytest.mark.asyncio
    async def test_invalid_ai_output_propagates(
        self, review_event, github_account, mock_github
    ):
        """AI 출력 검증 실패는 예외로 전달"""
        with patch(
            "app.domain.review.workflow.review_code",
            new_callable=AsyncMock,
            side_effect=ReviewValidationError("bad"),
        ):
            with pytest.raises(ReviewValidationError):
                await create_review_workflow().ainvoke(ReviewState(event=review_event))

        review = await _load_review(review_event.review_id)
        assert review.status == "PROCESSING"
