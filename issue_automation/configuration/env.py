"""Pydantic Settings model for application configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from issue_automation.utils.constants import (
    DEFAULT_COMMENT_TEMPLATE,
    DEFAULT_DAEMON_INTERVAL_MS,
    DEFAULT_DOING_LABEL,
    DEFAULT_GITHUB_API_URL,
    DEFAULT_MAX_ISSUES_PER_RUN,
    DEFAULT_TASK_LABEL,
)


class Settings(BaseSettings):
    """Environment variable settings for the application.

    Empty variables fall back to the defaults below.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        env_ignore_empty=True,
        extra="ignore",
    )

    # Generic application-wide settings
    DEBUG: bool = False

    # GitHub API settings
    GITHUB_API_URL: str = DEFAULT_GITHUB_API_URL
    GITHUB_TOKEN: str | None = None
    GITHUB_OWNER: str | None = None
    GITHUB_REPO: str | None = None
    # owner/repo form, as exported by GitHub Actions
    GITHUB_REPOSITORY: str | None = None

    # Automation settings
    TASK_LABEL: str = DEFAULT_TASK_LABEL
    DOING_LABEL: str = DEFAULT_DOING_LABEL
    MAX_ISSUES_PER_RUN: int = DEFAULT_MAX_ISSUES_PER_RUN
    COMMENT_TEMPLATE: str = DEFAULT_COMMENT_TEMPLATE

    # Daemon settings
    DAEMON_MODE: bool = False
    DAEMON_INTERVAL: int = DEFAULT_DAEMON_INTERVAL_MS
