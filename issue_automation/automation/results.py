"""Contains results of automation runs."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class RunOutcome(str, Enum):
    """What a single automation run ended up doing."""

    PROCESSED = "processed"
    SKIPPED = "skipped"
    NO_ACTION = "no_action"
    FAILED = "failed"


@dataclass(frozen=True)
class ClaimedIssue:
    """Reference to the issue claimed during a run."""

    number: int
    title: str


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class RunResult:
    """Transient report of one automation run. Never persisted."""

    success: bool
    outcome: RunOutcome
    message: str
    claimed_issue: ClaimedIssue | None = None
    timestamp: str = field(default_factory=utc_timestamp)
