from typing import Literal

from langgraph.graph import END, StateGraph
from langgraph.graph.state import CompiledStateGraph
from sqlalchemy import select

from app.core.logging import get_logger
from app.domain.account.service import get_github_access_token
from app.domain.review.schemas import ReviewState, ReviewStatus
from app.domain.review.store import complete_review, fail_review, transition_review
from app.infra.db.database import session_scope
from app.infra.db.models import Repository
from app.infra.github.client import (
    get_pull_request,
    list_pull_request_files,
    parse_full_name,
)
from app.infra.llm.client import review_code

logger = get_logger(__name__)

NO_REPOSITORY_REASON = "No repository found."
NO_TOKEN_REASON = "GitHub access token not found."
INVALID_NAME_REASON = "Invalid repository name."
NO_REVIEW_REASON = "Review not found."


async def mark_processing_node(state: ReviewState) -> ReviewState:
    """상태를 PROCESSING으로 변경, 리뷰가 삭제되었으면 종료"""
    event = state["event"]
    async with session_scope() as session:
        review = await transition_review(session, event.review_id, ReviewStatus.PROCESSING)

    if review is None:
        return {**state, "error_message": NO_REVIEW_REASON}
    return state


async def load_repository_node(state: ReviewState) -> ReviewState:
    """레포지토리 조회 노드"""
    event = state["event"]
    async with session_scope() as session:
        stmt = select(Repository.full_name).where(Repository.id == event.repository_id)
        full_name = (await session.execute(stmt)).scalar_one_or_none()

    if full_name is None:
        logger.warning("load_repository_node: 레포지토리 없음 repository_id=%s", event.repository_id)
        return {**state, "error_message": NO_REPOSITORY_REASON}

    return {**state, "full_name": full_name}


async def resolve_token_node(state: ReviewState) -> ReviewState:
    """요청 사용자의 GitHub 토큰 조회 노드"""
    event = state["event"]
    async with session_scope() as session:
        access_token = await get_github_access_token(session, event.user_id)

    if not access_token:
        logger.warning("resolve_token_node: GitHub 토큰 없음")
        return {**state, "error_message": NO_TOKEN_REASON}

    return {**state, "access_token": access_token}


async def parse_repository_name_node(state: ReviewState) -> ReviewState:
    """full_name에서 owner/repo 분리 노드"""
    try:
        owner, repo = parse_full_name(state["full_name"])
    except ValueError as e:
        logger.warning("parse_repository_name_node: %s", e)
        return {**state, "error_message": INVALID_NAME_REASON}

    return {**state, "owner": owner, "repo": repo}


async def fetch_pull_request_node(state: ReviewState) -> ReviewState:
    """GitHub에서 PR 파일 diff와 메타데이터 조회 노드"""
    event = state["event"]
    owner, repo, token = state["owner"], state["repo"], state["access_token"]

    files = await list_pull_request_files(owner, repo, event.pr_number, token)
    pull_request = await get_pull_request(owner, repo, event.pr_number, token)

    logger.info("fetch_pull_request_node 완료 pr=%d files=%d", event.pr_number, len(files))
    return {**state, "files": files, "pull_request": pull_request}


async def generate_review_node(state: ReviewState) -> ReviewState:
    """AI 리뷰 생성 노드"""
    event = state["event"]
    result = await review_code(
        pr_title=state["pull_request"].title,
        files=state["files"],
        session_id=event.review_id,
    )

    logger.info(
        "generate_review_node 완료 risk_score=%.1f comments=%d",
        result.risk_score,
        len(result.comments),
    )
    return {**state, "result": result}


async def save_result_node(state: ReviewState) -> ReviewState:
    """리뷰 결과 저장 노드"""
    event = state["event"]
    async with session_scope() as session:
        await complete_review(session, event.review_id, state["result"])
    return state


async def mark_failed_node(state: ReviewState) -> ReviewState:
    """실패 사유 저장 노드"""
    event = state["event"]
    async with session_scope() as session:
        await fail_review(session, event.review_id, state["error_message"])
    logger.info("리뷰 실패 처리 reason=%s", state["error_message"])
    return state


def check_error(state: ReviewState) -> Literal["continue", "fail"]:
    """에러 상태 확인: 에러 있으면 실패 처리, 없으면 다음 노드로"""
    if state.get("error_message"):
        return "fail"
    return "continue"


def create_review_workflow() -> CompiledStateGraph:
    """PR 리뷰 작업 워크플로우 생성"""
    workflow = StateGraph(ReviewState)

    workflow.add_node("mark_processing", mark_processing_node)
    workflow.add_node("load_repository", load_repository_node)
    workflow.add_node("resolve_token", resolve_token_node)
    workflow.add_node("parse_repository_name", parse_repository_name_node)
    workflow.add_node("fetch_pull_request", fetch_pull_request_node)
    workflow.add_node("generate_review", generate_review_node)
    workflow.add_node("save_result", save_result_node)
    workflow.add_node("mark_failed", mark_failed_node)

    workflow.set_entry_point("mark_processing")
    # 기록할 리뷰가 없으므로 mark_failed 없이 종료
    workflow.add_conditional_edges(
        "mark_processing",
        check_error,
        {
            "continue": "load_repository",
            "fail": END,
        },
    )

    for node, next_node in (
        ("load_repository", "resolve_token"),
        ("resolve_token", "parse_repository_name"),
        ("parse_repository_name", "fetch_pull_request"),
    ):
        workflow.add_conditional_edges(
            node,
            check_error,
            {
                "continue": next_node,
                "fail": "mark_failed",
            },
        )

    workflow.add_edge("fetch_pull_request", "generate_review")
    workflow.add_edge("generate_review", "save_result")
    workflow.add_edge("save_result", END)
    workflow.add_edge("mark_failed", END)

    return workflow.compile()
