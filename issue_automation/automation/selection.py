"""Decides which task-labeled issue, if any, is safe to claim on this run."""

from typing import Awaitable, Callable, Sequence

import structlog

from issue_automation.github.abc import IssueServiceBase
from issue_automation.schemas.issue import IssueModel
from issue_automation.utils.constants import HANDOFF_MARKER

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

CommentProbe = Callable[[int], Awaitable[bool]]
"""Answers whether the latest comment on an issue already contains the handoff marker."""


def make_handoff_probe(service: IssueServiceBase, marker: str = HANDOFF_MARKER) -> CommentProbe:
    """Build a comment probe that checks the latest comment of an issue for the handoff marker."""

    async def probe(issue_number: int) -> bool:
        comment = await service.get_latest_comment(issue_number)
        if comment is None:
            logger.info("Issue has no comments", issue_number=issue_number)
            return False
        has_marker = marker in (comment.body or "")
        logger.info("Checked latest comment for handoff marker", issue_number=issue_number, marker=marker, has_marker=has_marker)
        return has_marker

    return probe


async def select_eligible_issue(
    candidates: Sequence[IssueModel],
    doing_label: str,
    comment_probe: CommentProbe,
) -> IssueModel | None:
    """Pick the first candidate that is neither claimed nor already handed off.

    Candidates are scanned in the given order (most recently created first) and
    the scan stops at the first eligible issue, so at most one issue is returned.
    An issue is skipped when it carries the doing label, when its latest comment
    holds the handoff marker, or when the comment probe fails. Skipping on a
    failed probe avoids claiming an issue twice.
    """
    for issue in candidates:
        logger.info("Checking issue", issue_number=issue.number, title=issue.title)

        if issue.has_label(doing_label):
            logger.info("Skipping issue already in progress", issue_number=issue.number, doing_label=doing_label)
            continue

        try:
            handed_off = await comment_probe(issue.number)
        except Exception as exc:
            logger.warning(
                "Could not read latest comment, skipping issue",
                issue_number=issue.number,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            continue

        if handed_off:
            logger.info("Skipping issue already handed off", issue_number=issue.number)
            continue

        logger.info("Issue is eligible", issue_number=issue.number, title=issue.title)
        return issue

    logger.info("No eligible issues found", candidate_count=len(candidates))
    return None
