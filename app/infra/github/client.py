import asyncio
import re

import httpx

from app.core.config import settings
from app.core.logging import get_logger
from app.domain.github.schemas import (
    GitHubRepo,
    PRAuthor,
    PullRequest,
    PullRequestFile,
)

logger = get_logger(__name__)

GITHUB_API_BASE = "https://api.github.com"

GITHUB_PAGE_SIZE = 100

FULL_NAME_PATTERN = re.compile(r"^([a-zA-Z0-9_.-]+)/([a-zA-Z0-9_.-]+)$")

_client = httpx.AsyncClient(timeout=settings.github_timeout)
_request_semaphore = asyncio.Semaphore(settings.github_max_concurrent_requests)


def _get_headers(token: str | None = None) -> dict[str, str]:
    """GitHub API 요청 헤더 생성

    Args:
        token: GitHub OAuth 토큰

    Returns:
        HTTP 헤더 딕셔너리
    """
    headers = {"Accept": "application/vnd.github.v3+json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


async def close_client():
    """httpx 클라이언트 종료"""
    await _client.aclose()


def parse_full_name(full_name: str) -> tuple[str, str]:
    """저장된 full_name("owner/repo")에서 owner와 repo 추출

    Args:
        full_name: 레포지토리 전체 이름

    Returns:
        owner, repo 튜플

    Raises:
        ValueError: owner/repo 형식이 아닌 경우
    """
    match = FULL_NAME_PATTERN.match(full_name or "")
    if not match:
        raise ValueError(f"유효하지 않은 레포지토리 이름: {full_name}")
    return match.group(1), match.group(2)


async def _get_all_pages(url: str, token: str | None, params: dict | None = None) -> list[dict]:
    """페이지당 100개씩, 마지막 페이지까지 모두 조회

    Args:
        url: 목록 API URL
        token: GitHub OAuth 토큰
        params: 추가 쿼리 파라미터

    Returns:
        모든 페이지 항목을 이어붙인 리스트
    """
    items: list[dict] = []
    page = 1

    while True:
        page_params = {**(params or {}), "per_page": GITHUB_PAGE_SIZE, "page": page}
        response = await _client.get(url, headers=_get_headers(token), params=page_params)
        response.raise_for_status()
        data = response.json()

        items.extend(data)
        if len(data) < GITHUB_PAGE_SIZE:
            break
        page += 1

    return items


def _to_pull_request(data: dict) -> PullRequest:
    """GitHub PR 응답을 PullRequest로 변환"""
    user = data.get("user") or {}
    return PullRequest(
        id=data["id"],
        number=data["number"],
        title=data["title"],
        state=data["state"],
        draft=data.get("draft", False),
        html_url=data["html_url"],
        author=PRAuthor(login=user.get("login", "ghost"), avatar_url=user.get("avatar_url")),
        head_ref=data["head"]["ref"],
        head_sha=data["head"]["sha"],
        base_ref=data["base"]["ref"],
        additions=data.get("additions", 0),
        deletions=data.get("deletions", 0),
        changed_files=data.get("changed_files", 0),
        created_at=data.get("created_at"),
        updated_at=data.get("updated_at"),
        merged_at=data.get("merged_at"),
    )


async def list_user_repos(token: str) -> list[GitHubRepo]:
    """인증된 사용자가 접근 가능한 레포지토리 전체 조회

    Args:
        token: GitHub OAuth 토큰

    Returns:
        최근 업데이트 순 레포지토리 목록
    """
    url = f"{GITHUB_API_BASE}/user/repos"
    data = await _get_all_pages(url, token, {"sort": "updated"})

    repos = [
        GitHubRepo(
            id=repo["id"],
            name=repo["name"],
            full_name=repo["full_name"],
            private=repo.get("private", False),
            html_url=repo["html_url"],
            description=repo.get("description"),
            language=repo.get("language"),
            stargazers_count=repo.get("stargazers_count", 0),
            updated_at=repo.get("updated_at"),
        )
        for repo in data
    ]

    logger.info("레포지토리 조회 완료 count=%d", len(repos))
    return repos


async def get_pull_request(owner: str, repo: str, pull_number: int, token: str) -> PullRequest:
    """개별 PR 상세 정보 조회

    Args:
        owner: 레포지토리 소유자
        repo: 레포지토리 이름
        pull_number: PR 번호
        token: GitHub OAuth 토큰

    Returns:
        변경 통계를 포함한 PR 정보
    """
    url = f"{GITHUB_API_BASE}/repos/{owner}/{repo}/pulls/{pull_number}"
    response = await _client.get(url, headers=_get_headers(token))
    response.raise_for_status()

    logger.info("PR 조회 완료 repo=%s/%s pr=%d", owner, repo, pull_number)
    return _to_pull_request(response.json())


async def list_pull_requests(
    owner: str,
    repo: str,
    token: str,
    state: str = "open",
    per_page: int | None = None,
) -> list[PullRequest]:
    """레포지토리 PR 목록 조회

    목록 API는 additions/deletions/changed_files를 주지 않으므로
    PR마다 상세 API를 추가로 호출한다.

    Args:
        owner: 레포지토리 소유자
        repo: 레포지토리 이름
        token: GitHub OAuth 토큰
        state: "open", "closed", "all"
        per_page: 가져올 PR 개수

    Returns:
        최근 업데이트 순 PR 목록
    """
    url = f"{GITHUB_API_BASE}/repos/{owner}/{repo}/pulls"
    params = {
        "state": state,
        "per_page": min(per_page or settings.github_pull_list_size, GITHUB_PAGE_SIZE),
        "sort": "updated",
        "direction": "desc",
    }

    response = await _client.get(url, headers=_get_headers(token), params=params)
    response.raise_for_status()
    pulls = response.json()

    async def fetch_detail_with_limit(pr_number: int) -> PullRequest:
        async with _request_semaphore:
            return await get_pull_request(owner, repo, pr_number, token)

    tasks = [fetch_detail_with_limit(pr["number"]) for pr in pulls]
    detailed = await asyncio.gather(*tasks)

    logger.info("PR 목록 조회 완료 repo=%s/%s state=%s count=%d", owner, repo, state, len(detailed))
    return list(detailed)


async def list_pull_request_files(
    owner: str,
    repo: str,
    pull_number: int,
    token: str,
) -> list[PullRequestFile]:
    """PR에서 변경된 파일 목록 전체 조회

    Args:
        owner: 레포지토리 소유자
        repo: 레포지토리 이름
        pull_number: PR 번호
        token: GitHub OAuth 토큰

    Returns:
        변경된 파일 목록, 바이너리 파일은 patch가 None
    """
    url = f"{GITHUB_API_BASE}/repos/{owner}/{repo}/pulls/{pull_number}/files"
    data = await _get_all_pages(url, token)

    files = [
        PullRequestFile(
            sha=f.get("sha"),
            filename=f["filename"],
            status=f["status"],
            additions=f.get("additions", 0),
            deletions=f.get("deletions", 0),
            changes=f.get("changes", 0),
            patch=f.get("patch"),
            previous_filename=f.get("previous_filename"),
        )
        for f in data
    ]

    logger.info("PR 파일 조회 완료 repo=%s/%s pr=%d files=%d", owner, repo, pull_number, len(files))
    return files
