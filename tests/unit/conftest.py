"""Fixtures for unit tests."""

from datetime import datetime, timezone
from typing import Callable, Generator, Literal, Sequence

import pytest
import structlog

from issue_automation.configuration.models import AutomationConfig
from issue_automation.github.abc import IssueServiceBase
from issue_automation.github.exceptions import ServiceError
from issue_automation.schemas.issue import CommentModel, IssueModel, LabelModel


@pytest.fixture(autouse=True)
def configure_structlog_for_caplog() -> Generator[None, None, None]:
    """Configure structlog for use with caplog."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    yield
    structlog.reset_defaults()


def build_issue(number: int, labels: Sequence[str] = ("ai task",), title: str | None = None) -> IssueModel:
    """Build an open issue snapshot carrying the given label names."""
    timestamp = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return IssueModel(
        number=number,
        title=title or f"Issue {number}",
        body="",
        state="open",
        labels=[LabelModel(id=index + 1, name=name, color="ededed") for index, name in enumerate(labels)],
        created_at=timestamp,
        updated_at=timestamp,
    )


def build_comment(body: str, comment_id: int = 1) -> CommentModel:
    """Build a comment snapshot with the given body."""
    timestamp = datetime(2024, 1, 2, tzinfo=timezone.utc)
    return CommentModel(id=comment_id, body=body, created_at=timestamp, updated_at=timestamp, author="octocat")


class FakeIssueService(IssueServiceBase):
    """In-memory issue tracker recording every write."""

    def __init__(
        self,
        issues: Sequence[IssueModel] = (),
        latest_comments: dict[int, str] | None = None,
        failing_operations: Sequence[str] = (),
        unreadable_comment_issues: Sequence[int] = (),
    ) -> None:
        """Initialize the tracker with issues (newest first) and the body of each issue's latest comment."""
        self.issues = list(issues)
        self.latest_comments = dict(latest_comments or {})
        self.failing_operations = set(failing_operations)
        self.unreadable_comment_issues = set(unreadable_comment_issues)
        self.labels: dict[int, list[str]] = {issue.number: [label.name for label in issue.labels] for issue in self.issues}
        self.posted_comments: list[tuple[int, str]] = []
        self.comment_reads: list[int] = []
        self.list_calls = 0

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.failing_operations:
            raise ServiceError(operation, "simulated failure", 502)

    async def list_issues_with_label(self, label: str, state: Literal["open", "closed", "all"] = "open") -> list[IssueModel]:
        """List issues whose label snapshot contains the label."""
        self.list_calls += 1
        self._maybe_fail("list_issues_with_label")
        return [issue for issue in self.issues if issue.has_label(label)]

    async def get_latest_comment(self, issue_number: int) -> CommentModel | None:
        """Return the stored latest comment, if any."""
        self.comment_reads.append(issue_number)
        if issue_number in self.unreadable_comment_issues:
            raise ServiceError("get_latest_comment", "simulated failure", 500)
        body = self.latest_comments.get(issue_number)
        return None if body is None else build_comment(body)

    async def post_comment(self, issue_number: int, body: str) -> None:
        """Record the comment and make it the latest one."""
        self._maybe_fail("post_comment")
        self.posted_comments.append((issue_number, body))
        self.latest_comments[issue_number] = body

    async def add_label(self, issue_number: int, label: str) -> None:
        """Add the label once, ignoring repeats like GitHub does."""
        self._maybe_fail("add_label")
        current = self.labels.setdefault(issue_number, [])
        if label not in current:
            current.append(label)

    async def remove_label(self, issue_number: int, label: str) -> None:
        """Remove the label if present."""
        self._maybe_fail("remove_label")
        current = self.labels.setdefault(issue_number, [])
        if label in current:
            current.remove(label)


@pytest.fixture
def make_issue() -> Callable[..., IssueModel]:
    """Factory fixture for issue snapshots."""
    return build_issue


@pytest.fixture
def make_service() -> Callable[..., FakeIssueService]:
    """Factory fixture for the in-memory issue service."""
    return FakeIssueService


@pytest.fixture
def automation_config() -> AutomationConfig:
    """A valid configuration using the default labels and template."""
    return AutomationConfig(
        owner="octocat",
        repo="Hello-World",
        github_token="test-token",
        github_api_url="https://api.github.com",
        task_label="ai task",
        doing_label="ai doing",
        max_issues_per_run=10,
        comment_template="@claude /note-issue-task-run #{{issue_number}}",
        daemon_mode=False,
        daemon_interval_ms=300000,
    )
