from enum import Enum

import httpx
from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from app.core.config import settings


class ErrorCode(str, Enum):
    """에러 코드 열거형"""

    UNAUTHORIZED = "UNAUTHORIZED"

    REPOSITORY_NOT_FOUND = "REPOSITORY_NOT_FOUND"
    REVIEW_NOT_FOUND = "REVIEW_NOT_FOUND"
    INVALID_REPOSITORY_NAME = "INVALID_REPOSITORY_NAME"

    GITHUB_NOT_CONNECTED = "GITHUB_NOT_CONNECTED"
    GITHUB_UNAUTHORIZED = "GITHUB_UNAUTHORIZED"
    GITHUB_NOT_FOUND = "GITHUB_NOT_FOUND"
    GITHUB_API_ERROR = "GITHUB_API_ERROR"

    REVIEW_VALIDATION_ERROR = "REVIEW_VALIDATION_ERROR"

    RATE_LIMITED = "RATE_LIMITED"


class CustomException(Exception):
    def __init__(
        self,
        status_code: int,
        error_code: ErrorCode | str,
        message: str,
        detail: str | None = None,
    ):
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        self.detail = detail
        super().__init__(message)


class UnauthorizedError(CustomException):
    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=401,
            error_code=ErrorCode.UNAUTHORIZED,
            message="인증 정보가 없습니다",
            detail=detail,
        )


class RepositoryNotFoundError(CustomException):
    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=404,
            error_code=ErrorCode.REPOSITORY_NOT_FOUND,
            message="레포지토리를 찾을 수 없습니다",
            detail=detail,
        )


class ReviewNotFoundError(CustomException):
    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=404,
            error_code=ErrorCode.REVIEW_NOT_FOUND,
            message="리뷰를 찾을 수 없습니다",
            detail=detail,
        )


class GitHubNotConnectedError(CustomException):
    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=412,
            error_code=ErrorCode.GITHUB_NOT_CONNECTED,
            message="GitHub 계정이 연결되지 않았습니다",
            detail=detail,
        )


class InvalidRepositoryNameError(CustomException):
    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=400,
            error_code=ErrorCode.INVALID_REPOSITORY_NAME,
            message="레포지토리 이름이 올바르지 않습니다",
            detail=detail,
        )


class GitHubAPIError(CustomException):
    def __init__(self, status_code: int = 502, detail: str | None = None):
        error_code = {
            401: ErrorCode.GITHUB_UNAUTHORIZED,
            404: ErrorCode.GITHUB_NOT_FOUND,
        }.get(status_code, ErrorCode.GITHUB_API_ERROR)
        super().__init__(
            status_code=status_code if status_code in (401, 404) else 502,
            error_code=error_code,
            message="GitHub API 호출에 실패했습니다",
            detail=detail,
        )

    @classmethod
    def from_http_error(cls, error: httpx.HTTPStatusError) -> "GitHubAPIError":
        status_code = error.response.status_code
        return cls(status_code=status_code, detail=f"GitHub API 오류: HTTP {status_code}")

    @classmethod
    def from_request_error(cls, error: httpx.RequestError) -> "GitHubAPIError":
        """타임아웃, 연결 실패 등 응답을 받지 못한 경우 502"""
        return cls(detail=f"GitHub API 요청 실패: {type(error).__name__}")


class ReviewValidationError(CustomException):
    """LLM 리뷰 응답이 스키마와 맞지 않을 때 발생"""

    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=502,
            error_code=ErrorCode.REVIEW_VALIDATION_ERROR,
            message="AI 리뷰 응답 검증에 실패했습니다",
            detail=detail,
        )


def register_exception_handlers(app):
    @app.exception_handler(CustomException)
    async def custom_exception_handler(request: Request, exc: CustomException):
        content = {
            "error_code": exc.error_code,
            "message": exc.message,
        }
        if exc.detail and not settings.is_production:
            content["detail"] = exc.detail

        return JSONResponse(
            status_code=exc.status_code,
            content=content,
        )

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
        return JSONResponse(
            status_code=429,
            content={
                "error_code": ErrorCode.RATE_LIMITED,
                "message": "요청이 너무 많습니다. 잠시 후 다시 시도해주세요",
                "detail": str(exc.detail),
            },
        )
