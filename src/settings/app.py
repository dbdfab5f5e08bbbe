"""Application settings powered by Pydantic BaseSettings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_GITHUB_API_URL = "https://api.github.com"


class AppSettings(BaseSettings):
    """Centralized environment configuration.

    Values are read from the variables GitHub Actions exports to every
    step, so the gate needs no extra wiring inside a workflow.
    """

    model_config = SettingsConfigDict(
        env_prefix="", case_sensitive=False, env_file=".env", env_file_encoding="utf-8"
    )

    github_token: str | None = Field(default=None, validation_alias="GITHUB_TOKEN")
    github_repository: str | None = Field(
        default=None, validation_alias="GITHUB_REPOSITORY"
    )
    github_sha: str | None = Field(default=None, validation_alias="GITHUB_SHA")
    github_event_path: str | None = Field(
        default=None, validation_alias="GITHUB_EVENT_PATH"
    )
    github_api_url: str = Field(
        default=DEFAULT_GITHUB_API_URL, validation_alias="GITHUB_API_URL"
    )
    github_actions: bool = Field(default=False, validation_alias="GITHUB_ACTIONS")


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
