"""
요청 컨텍스트 미들웨어

- X-Request-ID 전달 또는 생성, 응답 헤더로 반환
- X-User-ID를 로그 컨텍스트에 바인딩
- 응답 상태에 따라 로그 레벨 구분 (5xx error, 4xx warning)
"""

import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.core.context import bind_request, clear_context
from app.core.logging import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
USER_ID_HEADER = "X-User-ID"

UNLOGGED_PATHS = frozenset({"/health", "/docs", "/openapi.json", "/redoc", "/favicon.ico"})


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """요청 단위 request_id/user_id 바인딩 및 접근 로그"""

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path in UNLOGGED_PATHS:
            return await call_next(request)

        request_id = bind_request(
            request.headers.get(REQUEST_ID_HEADER),
            request.headers.get(USER_ID_HEADER),
        )
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "처리되지 않은 예외 %s %s ip=%s",
                request.method,
                request.url.path,
                _client_ip(request),
            )
            raise
        else:
            elapsed_ms = (time.perf_counter() - started) * 1000
            status = response.status_code
            if status >= 500:
                log = logger.error
            elif status >= 400:
                log = logger.warning
            else:
                log = logger.info
            log("%s %s %d %.1fms", request.method, request.url.path, status, elapsed_ms)

            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            clear_context()
