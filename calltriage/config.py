"""
Application configuration using Pydantic Settings
"""

from typing import List
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # LLM Providers
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    ollama_base_url: str = "http://localhost:11434"

    # Sentiment analysis
    analyzer_llm_provider: str = "openai"
    analyzer_llm_model: str = "gpt-4o"
    fallback_llm_provider: str = ""
    fallback_llm_model: str = ""
    analyzer_timeout_seconds: float = 30.0

    # OpenMic voice platform
    openmic_api_url: str = "https://chat.openmic.ai/api"
    openmic_api_key: str = ""
    openmic_timeout_seconds: float = 10.0
    openmic_demo_mode: bool = False

    # Record store
    seed_sample_data: bool = True

    # API Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False
    cors_origins: str = "http://localhost:5173"

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
