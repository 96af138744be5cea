from contextlib import asynccontextmanager

from fastapi import FastAPI
from slowapi.middleware import SlowAPIMiddleware

from app.api.routers import api_router
from app.core.config import settings
from app.core.exceptions import register_exception_handlers
from app.core.limiter import limiter
from app.core.logging import get_logger, setup_logging
from app.core.middleware import RequestContextMiddleware
from app.domain.review.jobs import wait_for_running_jobs
from app.infra.db.database import close_db, init_db
from app.infra.github.client import close_client as close_github_client

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """DB 초기화, 종료 시 남은 리뷰 작업 대기 후 자원 정리"""
    if settings.is_production:
        missing = settings.validate_for_production()
        if missing:
            raise RuntimeError(f"프로덕션 설정 누락: {', '.join(missing)}")

    await init_db()
    logger.info("서비스 시작 env=%s llm_provider=%s", settings.environment, settings.llm_provider)

    try:
        yield
    finally:
        await wait_for_running_jobs()
        await close_github_client()
        await close_db()
        logger.info("서비스 종료")


_docs_enabled = not settings.is_production

app = FastAPI(
    title="PR Review Service",
    version="1.0.0",
    docs_url="/docs" if _docs_enabled else None,
    redoc_url="/redoc" if _docs_enabled else None,
    openapi_url="/openapi.json" if _docs_enabled else None,
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(RequestContextMiddleware)

register_exception_handlers(app)
app.include_router(api_router)


@app.get("/health")
async def health_check():
    return {"status": "UP"}
