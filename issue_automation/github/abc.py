"""Base ABC for issue service clients."""

from abc import ABC, abstractmethod
from typing import Literal

from issue_automation.schemas.issue import CommentModel, IssueModel


class IssueServiceBase(ABC):
    """Operations the automation needs from an issue tracker.

    Implementations raise ServiceError when an operation fails and never retry.
    """

    @abstractmethod
    async def list_issues_with_label(self, label: str, state: Literal["open", "closed", "all"] = "open") -> list[IssueModel]:
        """List issues carrying a label, most recently created first, bounded by the configured maximum."""
        pass

    @abstractmethod
    async def get_latest_comment(self, issue_number: int) -> CommentModel | None:
        """Get the newest comment on an issue, or None if it has no comments."""
        pass

    @abstractmethod
    async def post_comment(self, issue_number: int, body: str) -> None:
        """Append a comment to an issue."""
        pass

    @abstractmethod
    async def add_label(self, issue_number: int, label: str) -> None:
        """Add a label to an issue. Adding a label that is already present is not an error."""
        pass

    @abstractmethod
    async def remove_label(self, issue_number: int, label: str) -> None:
        """Remove a label from an issue. Removing a label that is not present is not an error."""
        pass
