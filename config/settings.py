"""
Centralized configuration for LeadMaps.

All settings are loaded from environment variables via .env file.
"""

from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "LeadMaps PRO"

    # Completion endpoint (OpenAI-compatible, Groq by default)
    llm_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("LLM_API_KEY", "GROQ_API_KEY"),
    )
    llm_base_url: str = "https://api.groq.com/openai/v1"
    llm_model: str = "llama-3.3-70b-versatile"
    max_tokens: int = 2000
    temperature: float = 0.6
    top_p: float = 0.95

    # Lead scoring
    lead_score_threshold_hot: int = 70
    lead_score_threshold_warm: int = 45
    top_opportunities: int = 10

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_version: str = "1.0.0"
    cors_origins: str = "*"

    # Logging
    log_level: str = "INFO"
    debug: bool = False

    @property
    def llm_configured(self) -> bool:
        return bool(self.llm_api_key)

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
