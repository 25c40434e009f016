"""Application settings powered by Pydantic BaseSettings."""

from typing import Annotated

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Centralized environment configuration.

    Every value can be overridden with a ``FLOWTRACE_`` prefixed
    environment variable, e.g. ``FLOWTRACE_SIMILARITY_THRESHOLD=0.3``.
    """

    model_config = SettingsConfigDict(
        env_prefix="FLOWTRACE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    similarity_threshold: Annotated[float, Field(ge=0.0, le=1.0)] = 0.5
    block_identity_chars: Annotated[int, Field(ge=1)] = 50
    common_block_identity_chars: Annotated[int, Field(ge=1)] = 100
    fingerprint_text_chars: Annotated[int, Field(ge=1)] = 50
    summary_preview_chars: Annotated[int, Field(ge=1)] = 50
    log_level: str = "INFO"
    log_json: bool = True


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
