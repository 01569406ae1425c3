"""Shared constants used across the application."""

# Handoff Constants
# -----------------

HANDOFF_MARKER = "@claude"
"""Literal token in a comment body showing the external agent was already notified."""

ISSUE_NUMBER_PLACEHOLDER = "{{issue_number}}"
"""Placeholder in the comment template that is replaced with the issue number."""

# Configuration Defaults
# ----------------------

DEFAULT_GITHUB_API_URL = "https://api.github.com"

DEFAULT_TASK_LABEL = "ai task"
"""Label marking an issue as queued for automated handoff."""

DEFAULT_DOING_LABEL = "ai doing"
"""Label marking an issue as already claimed."""

DEFAULT_MAX_ISSUES_PER_RUN = 10

DEFAULT_COMMENT_TEMPLATE = f"{HANDOFF_MARKER} /note-issue-task-run #{ISSUE_NUMBER_PLACEHOLDER}"

DEFAULT_DAEMON_INTERVAL_MS = 300_000
"""Five minutes between daemon ticks."""

SCRIPT_NAME = "github-issue-automation"
"""Name reported in run summaries."""
