from app.core.config import settings
from app.core.logging import get_logger
from app.infra.llm.base import BaseLLMClient
from app.infra.llm.providers import OpenAIClient, VLLMClient

logger = get_logger(__name__)

PROVIDERS: dict[str, type[BaseLLMClient]] = {
    OpenAIClient.provider: OpenAIClient,
    VLLMClient.provider: VLLMClient,
}

_review_client: BaseLLMClient | None = None


def get_review_client() -> BaseLLMClient:
    """설정된 프로바이더의 리뷰 모델 클라이언트, 최초 호출 시 생성"""
    global _review_client

    if _review_client is None:
        client_cls = PROVIDERS.get(settings.llm_provider)
        if client_cls is None:
            raise ValueError(f"지원하지 않는 LLM 프로바이더: {settings.llm_provider}")

        _review_client = client_cls()
        logger.info(
            "리뷰 모델 초기화 provider=%s model=%s",
            client_cls.provider,
            _review_client.get_model_name(),
        )

    return _review_client


def reset_clients() -> None:
    """클라이언트 캐시 초기화 - 테스트용"""
    global _review_client
    _review_client = None
