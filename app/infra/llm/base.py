from abc import ABC, abstractmethod

from langchain_core.language_models import BaseChatModel
from langchain_core.runnables import Runnable
from langchain_openai import ChatOpenAI

from app.core.config import settings

JSON_RESPONSE_FORMAT = {"type": "json_object"}


class BaseLLMClient(ABC):
    """OpenAI 호환 채팅 API 기반 리뷰 모델

    하위 클래스는 접속 정보만 제공하고, 생성 파라미터는 리뷰 설정을 공통으로 사용한다.
    """

    provider: str

    def __init__(self):
        self._model = ChatOpenAI(
            temperature=settings.review_temperature,
            max_tokens=settings.review_max_tokens,
            **self.connection_options(),
        )

    @abstractmethod
    def connection_options(self) -> dict:
        """model, api_key, base_url, timeout 등 ChatOpenAI 접속 인자"""

    def get_chat_model(self) -> BaseChatModel:
        return self._model

    def get_model_name(self) -> str:
        return self._model.model_name

    def with_json_response(self) -> Runnable:
        """JSON 객체 응답을 강제한 모델 반환"""
        return self._model.bind(response_format=JSON_RESPONSE_FORMAT)
