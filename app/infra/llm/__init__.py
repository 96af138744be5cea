from app.infra.llm.base import BaseLLMClient
from app.infra.llm.client import build_diff_content, parse_review_response, review_code
from app.infra.llm.factory import get_review_client, reset_clients
from app.infra.llm.providers import OpenAIClient, VLLMClient

__all__ = [
    "BaseLLMClient",
    "OpenAIClient",
    "VLLMClient",
    "get_review_client",
    "reset_clients",
    "build_diff_content",
    "parse_review_response",
    "review_code",
]
