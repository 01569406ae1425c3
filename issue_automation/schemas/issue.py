"""Pydantic schema for the issue snapshots the automation works with."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel


class LabelModel(BaseModel):
    """Pydantic model for a GitHub label."""

    id: int
    name: str
    color: str
    description: str | None = None


class IssueModel(BaseModel):
    """Read-only snapshot of a GitHub issue fetched during a run."""

    number: int
    title: str
    body: str | None = None
    state: Literal["open", "closed"] = "open"
    labels: list[LabelModel] = []
    comments: int = 0
    created_at: datetime
    updated_at: datetime

    def has_label(self, name: str) -> bool:
        """Check whether the issue carries a label with exactly this name."""
        return any(label.name == name for label in self.labels)


class CommentModel(BaseModel):
    """Pydantic model for a GitHub issue comment."""

    id: int
    body: str | None = None
    created_at: datetime
    updated_at: datetime
    author: str | None = None
