"""Application configuration utilities."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings

SUPPORTED_FETCHERS: List[str] = ["git", "github", "gitlab", "codeberg", "sourcehut"]


class Settings(BaseSettings):
    """Centralized configuration loaded from environment or .env file."""

    github_token: Optional[str] = Field(default=None, alias="GITHUB_TOKEN")

    pulls_url: str = "https://api.github.com/repos/melpa/melpa/pulls"
    review_queue_url: str = "https://github.com/melpa/melpa/pulls"
    diff_mirror: str = "https://patch-diff.githubusercontent.com/raw"
    issue_api_prefix: str = "https://api.github.com/repos/"
    issue_web_prefix: str = "https://github.com/"
    source_label: str = "MELPA Pulls"
    user_agent: str = "pullscout/0.1 (+https://github.com/melpa/melpa/pulls)"

    page_size: int = Field(default=100, ge=1, le=100)
    request_timeout: int = Field(default=30, description="Per-request transport timeout in seconds")
    aggregate_timeout: float = Field(default=60.0, description="Seconds to wait for all diff tasks")
    max_workers: int = Field(default=8, ge=1)

    cache_path: Path = Path.home() / ".cache" / "pullscout" / "catalog.json"
    supported_fetchers: List[str] = Field(default_factory=lambda: list(SUPPORTED_FETCHERS))

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "PULLSCOUT_"
        populate_by_name = True
        extra = "ignore"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
