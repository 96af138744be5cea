from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """애플리케이션 설정"""

    environment: str = "development"

    # LLM 프로바이더 선택: "openai" 또는 "vllm"
    llm_provider: str = "openai"

    # OpenAI 설정
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_timeout: float = 120.0

    # vLLM 설정 - OpenAI 호환 엔드포인트
    vllm_api_url: str = ""
    vllm_api_key: str = ""
    vllm_model: str = ""
    vllm_timeout: float = 180.0

    # 리뷰 생성 파라미터
    review_temperature: float = 0.3
    review_max_tokens: int = 2000

    # GitHub
    github_timeout: float = 60.0
    github_max_concurrent_requests: int = 5
    github_pull_list_size: int = 30

    # 데이터베이스
    database_url: str = "sqlite+aiosqlite:///./pr_review.db"
    database_echo: bool = False

    # 리뷰 작업 설정
    review_job_max_retries: int = 2
    review_job_retry_base_delay: float = 1.0
    max_concurrent_review_jobs: int = 10

    # 요청 제한
    rate_limit_enabled: bool = True
    review_trigger_rate_limit: str = "20/minute"

    # 로깅 설정
    log_level: str = "INFO"

    # Langfuse 설정
    langfuse_public_key: str = ""
    langfuse_secret_key: str = ""
    langfuse_base_url: str = "https://cloud.langfuse.com"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    def validate_for_production(self) -> list[str]:
        """프로덕션 환경에서 필수 설정 검증 후 누락된 항목 반환"""
        errors = []
        if self.llm_provider == "openai" and not self.openai_api_key:
            errors.append("OPENAI_API_KEY")
        if self.llm_provider == "vllm" and not self.vllm_api_url:
            errors.append("VLLM_API_URL")
        if self.database_url.startswith("sqlite"):
            errors.append("DATABASE_URL")
        return errors

    @model_validator(mode="after")
    def validate_llm_provider(self):
        """LLM 프로바이더 값 검증"""
        if self.llm_provider not in ("openai", "vllm"):
            raise ValueError(f"지원하지 않는 LLM 프로바이더: {self.llm_provider}")
        return self


settings = Settings()
