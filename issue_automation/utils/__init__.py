"""Utility modules for shared functionality."""

from .constants import (
    DEFAULT_COMMENT_TEMPLATE,
    DEFAULT_DAEMON_INTERVAL_MS,
    DEFAULT_DOING_LABEL,
    DEFAULT_MAX_ISSUES_PER_RUN,
    DEFAULT_TASK_LABEL,
    HANDOFF_MARKER,
    ISSUE_NUMBER_PLACEHOLDER,
)

__all__ = [
    "DEFAULT_COMMENT_TEMPLATE",
    "DEFAULT_DAEMON_INTERVAL_MS",
    "DEFAULT_DOING_LABEL",
    "DEFAULT_MAX_ISSUES_PER_RUN",
    "DEFAULT_TASK_LABEL",
    "HANDOFF_MARKER",
    "ISSUE_NUMBER_PLACEHOLDER",
]
