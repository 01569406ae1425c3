"""Models for configuration between CLI arguments and environment variables."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class AutomationConfig:
    """Validated configuration for the issue automation.

    Built once at startup and never modified afterwards.
    """

    owner: str
    repo: str
    github_token: str = field(repr=False)
    github_api_url: str
    task_label: str
    doing_label: str
    max_issues_per_run: int
    comment_template: str
    daemon_mode: bool
    daemon_interval_ms: int
    debug: bool = False

    @property
    def repository(self) -> str:
        """Return the repository in 'owner/repo' format."""
        return f"{self.owner}/{self.repo}"
