"""
SQLAlchemy 비동기 데이터베이스 설정

- 엔진/세션 팩토리는 init_db()에서 한 번 생성
- 각 작업 단계는 session_scope()로 독립된 트랜잭션 사용
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    pass


_engine: AsyncEngine | None = None
_sessionmaker: async_sessionmaker[AsyncSession] | None = None


def _is_memory_sqlite(url: str) -> bool:
    return url.startswith("sqlite") and (url.endswith("://") or ":memory:" in url)


async def init_db(database_url: str | None = None) -> AsyncEngine:
    """엔진 생성 및 테이블 생성"""
    global _engine, _sessionmaker

    url = database_url or settings.database_url
    engine_kwargs: dict = {"echo": settings.database_echo}
    if _is_memory_sqlite(url):
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        engine_kwargs["poolclass"] = StaticPool

    _engine = create_async_engine(url, **engine_kwargs)
    _sessionmaker = async_sessionmaker(_engine, expire_on_commit=False)

    # 모델 등록을 위해 import
    from app.infra.db import models  # noqa: F401

    async with _engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("데이터베이스 초기화 완료 dialect=%s", _engine.dialect.name)
    return _engine


async def close_db() -> None:
    """엔진 종료"""
    global _engine, _sessionmaker

    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _sessionmaker = None


def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """세션 팩토리 반환"""
    if _sessionmaker is None:
        raise RuntimeError("데이터베이스가 초기화되지 않았습니다")
    return _sessionmaker


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """커밋 또는 롤백으로 끝나는 세션 컨텍스트"""
    async with get_sessionmaker()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_session() -> AsyncIterator[AsyncSession]:
    """FastAPI 의존성: 요청 단위 세션"""
    async with session_scope() as session:
        yield session
