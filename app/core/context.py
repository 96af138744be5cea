"""
로그 상관관계용 contextvars

- HTTP 요청: request_id, user_id (미들웨어에서 바인딩)
- 리뷰 작업: job_id = review_id (백그라운드 태스크에서 바인딩)

asyncio 태스크는 생성 시점의 컨텍스트를 복사하므로
요청 중에 등록된 리뷰 작업도 같은 request_id로 로그가 남는다.
"""

import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)
_user_id: ContextVar[str | None] = ContextVar("user_id", default=None)
_job_id: ContextVar[str | None] = ContextVar("job_id", default=None)


def get_request_id() -> str | None:
    return _request_id.get()


def get_user_id() -> str | None:
    return _user_id.get()


def get_job_id() -> str | None:
    return _job_id.get()


def bind_request(request_id: str | None = None, user_id: str | None = None) -> str:
    """요청 컨텍스트 바인딩, request_id가 없으면 8자리 ID 생성"""
    request_id = request_id or uuid.uuid4().hex[:8]
    _request_id.set(request_id)
    _user_id.set(user_id or None)
    return request_id


@contextmanager
def job_context(job_id: str) -> Iterator[str]:
    """리뷰 작업 동안 job_id 바인딩, 종료 시 이전 값 복원"""
    token = _job_id.set(job_id)
    try:
        yield job_id
    finally:
        _job_id.reset(token)


def clear_context() -> None:
    _request_id.set(None)
    _user_id.set(None)
    _job_id.set(None)
