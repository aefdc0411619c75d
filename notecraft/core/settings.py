"""Application settings loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_prompts_path() -> Path:
    # notecraft/core/settings.py -> project_root/config/prompts.yaml
    return Path(__file__).resolve().parents[2] / "config" / "prompts.yaml"


class Settings(BaseSettings):
    """Runtime settings for the application."""

    replicate_api_token: str = Field(default="")
    llm_chat_model: str = Field(default="openai/gpt-5-nano")
    llm_structured_model: str = Field(default="openai/gpt-5-structured")
    llm_image_model: str = Field(default="black-forest-labs/flux-schnell")
    llm_image_aspect_ratio: str = Field(default="16:9")
    llm_max_completion_tokens: int = Field(default=1024)
    llm_max_output_tokens: int = Field(default=2048)
    llm_log_payloads: bool = Field(default=False)
    prompts_path: Path = Field(default_factory=_default_prompts_path)
    # Storage backend for drafts: "file", "sqlite" or "memory"
    storage_backend: str = Field(default="file")
    storage_dir: Path = Field(default=Path(".notecraft"))
    database_url: str = Field(default="sqlite:///notecraft.db")
    save_debounce_ms: int = Field(default=500)
    excerpt_length: int = Field(default=80)
    log_level: str = Field(default="INFO")
    service_name: str = Field(default="notecraft")
    environment: str = Field(default="development")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Return application settings instance."""
    return Settings()


__all__ = ["Settings", "get_settings"]
