import json
import os

from langchain_core.messages import HumanMessage, SystemMessage
from langfuse.langchain import CallbackHandler
from pydantic import ValidationError as PydanticValidationError

from app.core.config import settings
from app.core.exceptions import ReviewValidationError
from app.core.logging import get_logger
from app.domain.github.schemas import PullRequestFile
from app.domain.review.prompts import (
    EMPTY_DIFF_SUMMARY,
    FILE_DIFF_TEMPLATE,
    REVIEW_HUMAN,
    REVIEW_SYSTEM,
)
from app.domain.review.schemas import ReviewResult
from app.infra.llm.factory import get_review_client

logger = get_logger(__name__)

if settings.langfuse_public_key:
    os.environ["LANGFUSE_PUBLIC_KEY"] = settings.langfuse_public_key
if settings.langfuse_secret_key:
    os.environ["LANGFUSE_SECRET_KEY"] = settings.langfuse_secret_key
if settings.langfuse_base_url:
    os.environ["LANGFUSE_HOST"] = settings.langfuse_base_url


def get_langfuse_handler() -> CallbackHandler | None:
    """Langfuse 콜백 핸들러 반환"""
    if not settings.langfuse_public_key or not settings.langfuse_secret_key:
        return None

    return CallbackHandler()


def build_diff_content(files: list[PullRequestFile]) -> str:
    """파일별 diff를 하나의 프롬프트 텍스트로 연결, patch 없는 파일은 제외"""
    sections = [
        FILE_DIFF_TEMPLATE.format(filename=f.filename, status=f.status, patch=f.patch)
        for f in files
        if f.patch
    ]
    return "\n\n".join(sections)


def parse_review_response(content: str | None) -> ReviewResult:
    """LLM 응답 본문을 ReviewResult로 검증

    Raises:
        ReviewValidationError: 비어 있거나 JSON이 아니거나 스키마와 맞지 않는 경우
    """
    if not content:
        raise ReviewValidationError("AI 응답이 비어 있습니다")

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ReviewValidationError(f"JSON 파싱 실패: {e.msg}") from e

    try:
        return ReviewResult.model_validate(data)
    except PydanticValidationError as e:
        raise ReviewValidationError(f"스키마 검증 실패: {e.error_count()}개 오류") from e


async def review_code(
    pr_title: str,
    files: list[PullRequestFile],
    session_id: str | None = None,
) -> ReviewResult:
    """PR diff 기반 코드 리뷰 생성"""
    diff_content = build_diff_content(files)

    if not diff_content.strip():
        logger.info("리뷰할 diff 없음 files=%d", len(files))
        return ReviewResult(summary=EMPTY_DIFF_SUMMARY, risk_score=0, comments=[])

    logger.debug("코드 리뷰 요청 files=%d diff_length=%d", len(files), len(diff_content))

    langfuse_handler = get_langfuse_handler()
    config = {
        "callbacks": [langfuse_handler] if langfuse_handler else [],
        "metadata": {
            "langfuse_session_id": session_id,
            "langfuse_tags": ["review", "pull_request"],
        },
    }

    llm = get_review_client().with_json_response()
    messages = [
        SystemMessage(content=REVIEW_SYSTEM),
        HumanMessage(content=REVIEW_HUMAN.format(title=pr_title, changes=diff_content)),
    ]
    response = await llm.ainvoke(messages, config=config)

    result = parse_review_response(response.content)

    logger.debug(
        "코드 리뷰 완료 risk_score=%.1f comments=%d",
        result.risk_score,
        len(result.comments),
    )
    return result
