"""Reconciles configuration between CLI arguments and environment variables."""

import math

import structlog
from pydantic import ValidationError

from issue_automation.configuration.env import Settings
from issue_automation.configuration.exceptions import ConfigurationError, RequiredConfigurationElementError
from issue_automation.configuration.models import AutomationConfig
from issue_automation.utils.constants import ISSUE_NUMBER_PLACEHOLDER
from issue_automation.utils.github import split_repository_in_configuration

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def load_settings() -> Settings:
    """Load settings from the environment and .env file.

    Raises:
        ConfigurationError: If an environment variable cannot be parsed (for
            example a non-numeric MAX_ISSUES_PER_RUN).
    """
    try:
        return Settings()
    except ValidationError as exc:
        problems = "; ".join(f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors())
        raise ConfigurationError(f"Invalid environment configuration - {problems}") from exc


def _resolve_repository(settings: Settings, cli_repo: str | None) -> tuple[str, str]:
    """Work out owner and repository, preferring the CLI, then GITHUB_OWNER/GITHUB_REPO, then GITHUB_REPOSITORY."""
    if cli_repo is not None:
        try:
            return split_repository_in_configuration(cli_repo)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc

    owner = settings.GITHUB_OWNER
    repo = settings.GITHUB_REPO
    if (not owner or not repo) and settings.GITHUB_REPOSITORY:
        try:
            fallback_owner, fallback_repo = split_repository_in_configuration(settings.GITHUB_REPOSITORY)
        except ValueError as exc:
            raise ConfigurationError(f"GITHUB_REPOSITORY is invalid: {exc}") from exc
        owner = owner or fallback_owner
        repo = repo or fallback_repo

    if not owner:
        raise RequiredConfigurationElementError("GitHub repository owner", env_name="GITHUB_OWNER", cli_name="--repo")
    if not repo:
        raise RequiredConfigurationElementError("GitHub repository name", env_name="GITHUB_REPO", cli_name="--repo")
    return owner, repo


def validate_automation_configuration(config: AutomationConfig) -> None:
    """Validates a fully assembled automation configuration.

    Args:
        config (AutomationConfig): The configuration to check.

    Raises:
        ConfigurationError: If a string field is blank, a numeric field is not
            strictly positive, or the comment template lacks the issue number
            placeholder.
    """
    required_fields = {
        "owner": config.owner,
        "repo": config.repo,
        "github_token": config.github_token,
        "github_api_url": config.github_api_url,
        "task_label": config.task_label,
        "doing_label": config.doing_label,
        "comment_template": config.comment_template,
    }
    for name, value in required_fields.items():
        if not value or not value.strip():
            raise ConfigurationError(f"Configuration field '{name}' is required")

    if config.max_issues_per_run <= 0:
        raise ConfigurationError(f"max_issues_per_run must be a positive number, got {config.max_issues_per_run}")

    if ISSUE_NUMBER_PLACEHOLDER not in config.comment_template:
        raise ConfigurationError(f"comment_template must include {ISSUE_NUMBER_PLACEHOLDER} placeholder")

    if config.daemon_interval_ms <= 0:
        raise ConfigurationError(f"daemon_interval_ms must be a positive number, got {config.daemon_interval_ms}")


def reconcile_automation_configuration(
    settings: Settings | None = None,
    cli_repo: str | None = None,
    cli_daemon: bool = False,
    cli_interval_seconds: float | None = None,
    cli_debug: bool = False,
) -> AutomationConfig:
    """Merge CLI arguments over environment settings and validate the result.

    The daemon flag is enabled if either source enables it. An interval given
    on the command line is in seconds and replaces DAEMON_INTERVAL, which is in
    milliseconds.

    Raises:
        RequiredConfigurationElementError: If the token or repository is missing.
        ConfigurationError: If any value is invalid.
    """
    if settings is None:
        settings = load_settings()

    if not settings.GITHUB_TOKEN:
        raise RequiredConfigurationElementError("GitHub token", env_name="GITHUB_TOKEN")

    owner, repo = _resolve_repository(settings, cli_repo)

    daemon_interval_ms = settings.DAEMON_INTERVAL
    if cli_interval_seconds is not None:
        if not math.isfinite(cli_interval_seconds):
            raise ConfigurationError(f"Daemon interval must be a finite number of seconds, got {cli_interval_seconds}")
        daemon_interval_ms = int(cli_interval_seconds * 1000)

    config = AutomationConfig(
        owner=owner,
        repo=repo,
        github_token=settings.GITHUB_TOKEN,
        github_api_url=settings.GITHUB_API_URL,
        task_label=settings.TASK_LABEL,
        doing_label=settings.DOING_LABEL,
        max_issues_per_run=settings.MAX_ISSUES_PER_RUN,
        comment_template=settings.COMMENT_TEMPLATE,
        daemon_mode=cli_daemon or settings.DAEMON_MODE,
        daemon_interval_ms=daemon_interval_ms,
        debug=cli_debug or settings.DEBUG,
    )
    validate_automation_configuration(config)
    logger.debug(
        "Reconciled automation configuration",
        repository=config.repository,
        task_label=config.task_label,
        doing_label=config.doing_label,
        max_issues_per_run=config.max_issues_per_run,
        daemon_mode=config.daemon_mode,
        daemon_interval_ms=config.daemon_interval_ms,
    )
    return config
