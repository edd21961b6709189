"""
Configuration management for the rich history sync client.

Handles environment variables and the defaults used when talking to the
query history backend.
"""

from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv(".env")


def env_field(*env_names: str, default: Any = None, **kwargs: Any):
    """Map environment variables to BaseSettings fields without deprecated env= usage."""
    if not env_names:
        raise ValueError("env_field requires at least one environment variable name")
    kwargs["validation_alias"] = AliasChoices(*env_names)
    return Field(default=default, **kwargs)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    # Backend settings
    base_url: str = env_field("RICH_HISTORY_BASE_URL", default="http://localhost:3000")
    api_token: Optional[str] = env_field("RICH_HISTORY_API_TOKEN")
    timeout_seconds: float = env_field("RICH_HISTORY_TIMEOUT_SECONDS", default=12.0)

    # Pagination
    page_size: int = env_field("RICH_HISTORY_PAGE_SIZE", default=100)
    first_page: int = env_field("RICH_HISTORY_FIRST_PAGE", default=1)

    # Logging settings
    log_level: str = env_field("LOG_LEVEL", default="INFO")
    log_file: Optional[str] = env_field("LOG_FILE")

    @property
    def api_root(self) -> str:
        return self.base_url.rstrip("/")


def get_settings() -> Settings:
    return Settings()
