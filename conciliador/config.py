"""
Settings for the reconciliation guardrails and the model client.
Values come from environment variables or the .env under CONCILIADOR_BASE_PATH.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


APP_BASE_PATH = Path(os.environ.get(
    "CONCILIADOR_BASE_PATH",
    Path.home() / "Documents" / "conciliador",
))
ENV_FILE_PATH = APP_BASE_PATH / ".env"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE_PATH),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        protected_namespaces=(),
    )

    # Application
    app_env: str = Field(default="development")
    app_log_level: str = Field(default="INFO")
    app_log_json: bool = Field(default=False)

    # Generative model (OpenAI-compatible chat completions)
    openai_api_key: Optional[str] = Field(default=None)
    openai_api_url: str = Field(default="https://api.openai.com/v1")
    model_name: str = Field(default="gpt-4.1-mini")
    model_temperature: float = Field(default=0.1)
    model_timeout_seconds: float = Field(default=60.0)

    # Fuzzy matching
    presence_threshold: float = Field(default=0.70)
    line_match_threshold: float = Field(default=0.60)
    min_token_length: int = Field(default=2)

    # Balance reconciliation
    balance_tolerance: float = Field(default=0.10)

    # Severity breakpoints (monetary units)
    severity_low_ceiling: float = Field(default=1000.0)
    severity_medium_ceiling: float = Field(default=10000.0)

    # Model payload
    excerpt_max_chars: int = Field(default=8000)
    preview_max_chars: int = Field(default=1000)

    # Storage
    reports_dir: Path = Field(default=APP_BASE_PATH / "reports")

    @property
    def has_model_credentials(self) -> bool:
        return bool(self.openai_api_key and self.openai_api_key.strip())

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
