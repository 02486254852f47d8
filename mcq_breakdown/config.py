"""
Engine configuration settings.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from mcq_breakdown.domain_types import RoleFilter


class Settings(BaseSettings):
    """Settings loaded from MCQ_-prefixed environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MCQ_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    ENV: Literal["development", "production", "test"] = "development"
    LOG_LEVEL: str = "INFO"

    # Report defaults, used when the caller does not pass explicit values
    DEFAULT_ROLE_FILTER: RoleFilter = RoleFilter.REGISTERED
    DEFAULT_SORT_CODE: int = Field(
        default=1,
        description="Sort code: 1 lastname, 2 firstname, 3 grade, 4 attempts; negate to flip",
    )

    # Separator between answers in a stored response summary
    # (e.g. "Paris; London" for a multi-answer question)
    RESPONSE_SUMMARY_SEPARATOR: str = "; "


# Global settings instance
settings = Settings()
