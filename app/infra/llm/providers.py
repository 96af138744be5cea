from app.core.config import settings
from app.infra.llm.base import BaseLLMClient


class OpenAIClient(BaseLLMClient):
    """OpenAI API"""

    provider = "openai"

    def connection_options(self) -> dict:
        if not settings.openai_api_key:
            raise ValueError("OPENAI_API_KEY가 설정되지 않았습니다")
        return {
            "model": settings.openai_model,
            "api_key": settings.openai_api_key,
            "timeout": settings.openai_timeout,
        }


class VLLMClient(BaseLLMClient):
    """vLLM 서버, OpenAI 호환 엔드포인트"""

    provider = "vllm"

    def connection_options(self) -> dict:
        if not settings.vllm_api_url:
            raise ValueError("VLLM_API_URL이 설정되지 않았습니다")
        return {
            "model": settings.vllm_model,
            # 키 검사 없는 서버는 임의 값 허용
            "api_key": settings.vllm_api_key or "EMPTY",
            "base_url": settings.vllm_api_url,
            "timeout": settings.vllm_timeout,
        }
