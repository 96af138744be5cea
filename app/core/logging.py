"""
structlog 로깅 설정

stdlib logging 위에 structlog를 얹어 앱 로그와 라이브러리 로그를 같은 포맷으로 출력한다.
개발 환경은 콘솔 렌더러, 프로덕션은 JSON 렌더러를 사용하며
프로덕션에서는 GitHub 토큰 등 민감 정보를 가린다.
"""

import logging
import re
import sys

import structlog

from app.core.config import settings
from app.core.context import get_job_id, get_request_id, get_user_id

MASK = "***"

SENSITIVE_PATTERNS = [
    (re.compile(r"(Bearer\s+)\S+", re.IGNORECASE), rf"\1{MASK}"),
    (re.compile(r"((?:access_)?token=)[^&\s]+", re.IGNORECASE), rf"\1{MASK}"),
    (re.compile(r"(api[_-]?key=)[^&\s]+", re.IGNORECASE), rf"\1{MASK}"),
    # GitHub 토큰 접두사: ghp_, gho_, ghu_, ghs_, ghr_
    (re.compile(r"\b(gh[pousr]_)[A-Za-z0-9]{20,}"), rf"\1{MASK}"),
    (re.compile(r"\bsk-[A-Za-z0-9_-]{16,}"), MASK),
]

SENSITIVE_KEYS = frozenset({"access_token", "accessToken", "token", "authorization", "api_key"})

QUIET_LOGGERS = (
    "httpcore",
    "httpx",
    "openai",
    "langchain",
    "langgraph",
    "langfuse",
    "aiosqlite",
    "sqlalchemy.engine",
    "anyio",
)


def _mask_sensitive_data(value: str) -> str:
    for pattern, replacement in SENSITIVE_PATTERNS:
        value = pattern.sub(replacement, value)
    return value


def add_context_processor(logger: logging.Logger, method_name: str, event_dict: dict) -> dict:
    """request_id, user_id, job_id(리뷰 ID)를 로그에 주입"""
    for key, value in (
        ("request_id", get_request_id()),
        ("user_id", get_user_id()),
        ("job_id", get_job_id()),
    ):
        if value:
            event_dict.setdefault(key, value)
    return event_dict


def mask_sensitive_processor(logger: logging.Logger, method_name: str, event_dict: dict) -> dict:
    """프로덕션에서 토큰 키와 토큰 형태 문자열 마스킹"""
    if not settings.is_production:
        return event_dict

    for key, value in event_dict.items():
        if key in SENSITIVE_KEYS:
            event_dict[key] = MASK
        elif isinstance(value, str):
            event_dict[key] = _mask_sensitive_data(value)
    return event_dict


def _shared_processors() -> list:
    processors = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        # logger.info("... pr=%d", n) 형태의 인자 치환
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        add_context_processor,
        structlog.processors.StackInfoRenderer(),
    ]
    if settings.is_production:
        processors.append(structlog.processors.format_exc_info)
    processors += [
        structlog.processors.UnicodeDecoder(),
        mask_sensitive_processor,
    ]
    return processors


def setup_logging(level: str | None = None) -> None:
    """root 로거에 structlog 포매터 연결"""
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
    shared = _shared_processors()

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.is_production
        else structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    )

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level)

    # uvicorn 로그도 root 핸들러로 출력
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.propagate = True

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
