"""GitHub client adapter for the githubkit library."""

from functools import wraps
from typing import Any, Awaitable, Callable, Literal, Self, TypeVar

import structlog
from githubkit.exception import GitHubException, RequestFailed
from pydantic import ValidationError

from issue_automation.schemas.issue import CommentModel, IssueModel
from issue_automation.utils.constants import DEFAULT_GITHUB_API_URL, DEFAULT_MAX_ISSUES_PER_RUN

from .abc import IssueServiceBase
from .client import GitHubClient, get_github_client
from .exceptions import ServiceError

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def raise_service_error(func: F) -> F:
    """Decorator translating githubkit failures into ServiceError, logging the details."""

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except RequestFailed as exc:
            status_code = exc.response.status_code
            logger.error(
                "GitHub request failed",
                function=func.__name__,
                status_code=status_code,
                url=str(getattr(exc.response, "url", "")),
                error=str(exc),
            )
            raise ServiceError(func.__name__, str(exc), status_code) from exc
        except GitHubException as exc:
            logger.error("GitHub request error", function=func.__name__, error_type=type(exc).__name__, error=str(exc))
            raise ServiceError(func.__name__, str(exc)) from exc
        except ValidationError as exc:
            logger.error("Unexpected GitHub payload", function=func.__name__, error=str(exc))
            raise ServiceError(func.__name__, f"unexpected response payload: {exc}") from exc

    return wrapper  # type: ignore


class GitHubKitAdapter(IssueServiceBase):
    """Issue service backed by the GitHub REST API through githubkit."""

    def __init__(self, client: GitHubClient, owner: str, repo_name: str, max_issues_per_run: int = DEFAULT_MAX_ISSUES_PER_RUN) -> None:
        """Initialize the GitHub client adapter with an already-initialized client."""
        self.client = client
        self.owner = owner
        self.repo_name = repo_name
        self.max_issues_per_run = max_issues_per_run

    @classmethod
    async def create(
        cls,
        owner: str,
        repo_name: str,
        github_token: str,
        github_api_url: str = DEFAULT_GITHUB_API_URL,
        max_issues_per_run: int = DEFAULT_MAX_ISSUES_PER_RUN,
    ) -> Self:
        """Create a new GitHub client adapter.

        Args:
            owner: Repository owner (user or organization)
            repo_name: Repository name
            github_token: Access token used for every request
            github_api_url: GitHub API URL (defaults to https://api.github.com)
            max_issues_per_run: Page size used when listing issues

        Returns:
            Configured GitHubKitAdapter instance
        """
        logger.info(
            "Creating client for GitHub instance and repository",
            github_api_url=github_api_url,
            owner=owner,
            repo_name=repo_name,
        )
        client = await get_github_client(github_token=github_token, github_api_url=github_api_url)
        return cls(client, owner, repo_name, max_issues_per_run)

    @raise_service_error
    async def list_issues_with_label(self, label: str, state: Literal["open", "closed", "all"] = "open") -> list[IssueModel]:
        """List issues carrying a label, newest first.

        Only the first page is requested, so at most max_issues_per_run issues
        are returned. Pull requests share the issues endpoint and are dropped.
        """
        logger.info("Fetching issues with label", label=label, state=state, per_page=self.max_issues_per_run)
        response = await self.client.rest.issues.async_list_for_repo(
            owner=self.owner,
            repo=self.repo_name,
            labels=label,
            state=state,
            sort="created",
            direction="desc",
            per_page=self.max_issues_per_run,
        )
        issues = [IssueModel.model_validate(raw) for raw in response.json() if "pull_request" not in raw]
        logger.info("Found issues with label", label=label, count=len(issues))
        return issues

    @raise_service_error
    async def get_latest_comment(self, issue_number: int) -> CommentModel | None:
        """Get the newest comment on an issue.

        The comments endpoint lists oldest first, so the issue's comment count
        is used to request only the final page of size one.
        """
        issue_response = await self.client.rest.issues.async_get(owner=self.owner, repo=self.repo_name, issue_number=issue_number)
        comment_count = int(issue_response.json().get("comments", 0))
        if comment_count == 0:
            logger.debug("Issue has no comments", issue_number=issue_number)
            return None

        response = await self.client.rest.issues.async_list_comments(
            owner=self.owner,
            repo=self.repo_name,
            issue_number=issue_number,
            per_page=1,
            page=comment_count,
        )
        comments: list[dict[str, Any]] = response.json()
        if not comments:
            return None
        raw = comments[-1]
        return CommentModel(
            id=raw["id"],
            body=raw.get("body"),
            created_at=raw["created_at"],
            updated_at=raw["updated_at"],
            author=(raw.get("user") or {}).get("login"),
        )

    @raise_service_error
    async def post_comment(self, issue_number: int, body: str) -> None:
        """Post a comment to an issue."""
        logger.info("Posting comment to issue", issue_number=issue_number)
        await self.client.rest.issues.async_create_comment(
            owner=self.owner,
            repo=self.repo_name,
            issue_number=issue_number,
            body=body,
        )
        logger.info("Posted comment to issue", issue_number=issue_number, body=body)

    @raise_service_error
    async def add_label(self, issue_number: int, label: str) -> None:
        """Add a label to an issue. GitHub ignores labels the issue already has."""
        logger.info("Adding label to issue", issue_number=issue_number, label=label)
        await self.client.rest.issues.async_add_labels(
            owner=self.owner,
            repo=self.repo_name,
            issue_number=issue_number,
            labels=[label],
        )
        logger.info("Added label to issue", issue_number=issue_number, label=label)

    @raise_service_error
    async def remove_label(self, issue_number: int, label: str) -> None:
        """Remove a label from an issue, treating an absent label as already removed."""
        logger.info("Removing label from issue", issue_number=issue_number, label=label)
        try:
            await self.client.rest.issues.async_remove_label(
                owner=self.owner,
                repo=self.repo_name,
                issue_number=issue_number,
                name=label,
            )
        except RequestFailed as exc:
            if exc.response.status_code != 404:
                raise
            logger.info("Label was not present on issue", issue_number=issue_number, label=label)
            return
        logger.info("Removed label from issue", issue_number=issue_number, label=label)
