"""Claims an issue by posting the handoff comment and applying the doing label."""

import structlog

from issue_automation.automation.exceptions import PartialClaimError
from issue_automation.github.abc import IssueServiceBase
from issue_automation.schemas.issue import IssueModel
from issue_automation.utils.constants import ISSUE_NUMBER_PLACEHOLDER

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def render_comment_body(template: str, issue_number: int) -> str:
    """Replace the issue number placeholder in the template. Nothing else in the template is touched."""
    return template.replace(ISSUE_NUMBER_PLACEHOLDER, str(issue_number))


async def claim_issue(service: IssueServiceBase, issue: IssueModel, comment_template: str, doing_label: str) -> None:
    """Post the handoff comment, then add the doing label.

    The two writes are not transactional. A failure to post the comment leaves
    the issue untouched and the error propagates. Any failure to add the
    label after the comment was posted raises PartialClaimError; the comment is
    not rolled back.
    """
    logger.info("Claiming issue", issue_number=issue.number, title=issue.title)
    comment_body = render_comment_body(comment_template, issue.number)

    await service.post_comment(issue.number, comment_body)

    try:
        await service.add_label(issue.number, doing_label)
    except Exception as exc:
        logger.error(
            "Comment posted but label could not be added",
            issue_number=issue.number,
            doing_label=doing_label,
            error=str(exc),
        )
        raise PartialClaimError(issue.number, comment_body, doing_label, exc) from exc

    logger.info("Claimed issue", issue_number=issue.number, doing_label=doing_label)
