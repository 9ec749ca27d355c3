"""Application settings and configuration management."""

from functools import lru_cache
from typing import List, Optional

from pydantic import ConfigDict, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application
    app_name: str = Field(default="Record Search")
    app_version: str = Field(default="1.0.0")
    debug: bool = Field(default=False)

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    workers: int = Field(default=1)

    # Search Configuration
    fuzzy_threshold: float = Field(default=0.3, ge=0.0, le=1.0)
    max_results: int = Field(default=50, ge=1)
    max_query_length: int = Field(default=200)
    enable_phonetic: bool = Field(default=True)
    regex_timeout_ms: float = Field(default=50.0, gt=0.0)  # per field
    parallel_strategies: bool = Field(default=True)
    highlight_tag: str = Field(default="mark")

    # Records loaded at startup; None uses the bundled sample file
    records_path: Optional[str] = Field(default=None)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")  # json or console

    # CORS
    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:8080", "http://localhost:8000"]
    )

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra environment variables
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
