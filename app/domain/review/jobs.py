"""리뷰 백그라운드 작업 실행기

- 트리거마다 asyncio 태스크 하나, 동시 실행 수는 세마포어로 제한
- 처리되지 않은 예외가 나면 워크플로우를 처음부터 다시 실행
- 모든 시도가 실패하면 마지막 예외로 실패 사유를 기록
"""

import asyncio
from asyncio import Semaphore, create_task

import httpx
from langgraph.graph.state import CompiledStateGraph

from app.core.config import settings
from app.core.context import job_context
from app.core.exceptions import ReviewValidationError
from app.core.logging import get_logger
from app.domain.review.schemas import ReviewRequestedEvent, ReviewState, ReviewStatus
from app.domain.review.store import fail_review, get_review
from app.domain.review.workflow import create_review_workflow
from app.infra.db.database import session_scope

logger = get_logger(__name__)

_job_semaphore = Semaphore(settings.max_concurrent_review_jobs)
_running_jobs: set[asyncio.Task] = set()
_workflow: CompiledStateGraph | None = None


def get_review_workflow() -> CompiledStateGraph:
    """컴파일된 리뷰 워크플로우 반환"""
    global _workflow

    if _workflow is None:
        _workflow = create_review_workflow()
    return _workflow


def describe_failure(error: Exception) -> str:
    """예외를 사람이 읽을 수 있는 실패 사유로 변환"""
    if isinstance(error, httpx.HTTPStatusError):
        return f"GitHub API error: HTTP {error.response.status_code}"
    if isinstance(error, httpx.RequestError):
        return "GitHub API request failed."
    if isinstance(error, ReviewValidationError):
        return "AI review response was invalid."
    return "Review generation failed."


async def _record_final_failure(review_id: str, reason: str) -> None:
    """재시도 소진 후 실패 기록, 이미 종료된 리뷰는 건드리지 않음"""
    async with session_scope() as session:
        review = await get_review(session, review_id)
        if review is None or ReviewStatus(review.status).is_terminal:
            logger.warning("최종 실패 기록 생략 review_id=%s", review_id)
            return
        await fail_review(session, review_id, reason)


async def run_review_job(event: ReviewRequestedEvent) -> ReviewState | None:
    """리뷰 작업 실행, 실패 시 지수 백오프로 처음부터 재시도

    Returns:
        마지막 워크플로우 상태, 모든 시도가 실패하면 None
    """
    max_attempts = settings.review_job_max_retries + 1
    base_delay = settings.review_job_retry_base_delay
    workflow = get_review_workflow()
    last_error: Exception | None = None

    with job_context(event.review_id):
        for attempt in range(max_attempts):
            try:
                state = await workflow.ainvoke(ReviewState(event=event))
                logger.info(
                    "리뷰 작업 종료 pr=%d attempt=%d error=%s",
                    event.pr_number,
                    attempt + 1,
                    state.get("error_message"),
                )
                return state

            except Exception as e:
                last_error = e
                logger.warning(
                    "리뷰 작업 실패 attempt=%d/%d error=%s",
                    attempt + 1,
                    max_attempts,
                    type(e).__name__,
                    exc_info=True,
                )

            if attempt < max_attempts - 1:
                delay = base_delay * (2**attempt)
                logger.info("리뷰 작업 재시도 대기 delay=%.1f초", delay)
                await asyncio.sleep(delay)

        logger.error("리뷰 작업 최종 실패 max_attempts=%d", max_attempts)
        await _record_final_failure(event.review_id, describe_failure(last_error))
        return None


async def _run_with_limit(event: ReviewRequestedEvent) -> None:
    async with _job_semaphore:
        try:
            await run_review_job(event)
        except Exception as e:
            logger.error("리뷰 작업 처리 실패 review_id=%s error=%s", event.review_id, e)


def enqueue_review_job(event: ReviewRequestedEvent) -> asyncio.Task:
    """리뷰 작업을 백그라운드 태스크로 등록"""
    task = create_task(_run_with_limit(event))
    _running_jobs.add(task)
    task.add_done_callback(_running_jobs.discard)

    logger.info("리뷰 작업 등록 review_id=%s pr=%d", event.review_id, event.pr_number)
    return task


async def wait_for_running_jobs() -> None:
    """실행 중인 리뷰 작업이 모두 끝날 때까지 대기"""
    if _running_jobs:
        await asyncio.gather(*_running_jobs, return_exceptions=True)
