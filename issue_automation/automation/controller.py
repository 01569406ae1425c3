"""Orchestrates one automation run: label check, selection and claim."""

import time

import structlog

from issue_automation.automation.claim import claim_issue
from issue_automation.automation.results import ClaimedIssue, RunOutcome, RunResult, utc_timestamp
from issue_automation.automation.selection import CommentProbe, make_handoff_probe, select_eligible_issue
from issue_automation.configuration.models import AutomationConfig
from issue_automation.github.abc import IssueServiceBase
from issue_automation.utils.constants import HANDOFF_MARKER, SCRIPT_NAME

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class IssueAutomation:
    """Runs the handoff automation against one repository."""

    def __init__(self, config: AutomationConfig, service: IssueServiceBase, comment_probe: CommentProbe | None = None) -> None:
        """Initialize the automation with its configuration and issue service."""
        self.config = config
        self.service = service
        self.comment_probe = comment_probe or make_handoff_probe(service)

    async def run(self) -> RunResult:
        """Run one full cycle and report what happened.

        Never raises: any error from listing, selection or claiming is returned
        as a failed result.
        """
        start_time = time.time()
        logger.info(
            "Starting issue automation",
            repository=self.config.repository,
            task_label=self.config.task_label,
            doing_label=self.config.doing_label,
        )
        try:
            result = await self._run()
        except Exception as exc:
            logger.error("Automation failed", error_type=type(exc).__name__, error=str(exc))
            result = RunResult(success=False, outcome=RunOutcome.FAILED, message=f"Automation failed: {exc}")
        logger.info("Finished issue automation", outcome=result.outcome.value, duration=round(time.time() - start_time, 2))
        return result

    async def _run(self) -> RunResult:
        # One listing serves both the presence check and the eligibility scan.
        task_issues = await self.service.list_issues_with_label(self.config.task_label)
        if not task_issues:
            logger.warning("No issues with task label found, skipping", task_label=self.config.task_label)
            return RunResult(
                success=True,
                outcome=RunOutcome.SKIPPED,
                message=f"Skipped - no issues with '{self.config.task_label}' label found",
            )
        logger.info("Found issues with task label", task_label=self.config.task_label, count=len(task_issues))

        selected = await select_eligible_issue(task_issues, self.config.doing_label, self.comment_probe)
        if selected is None:
            return RunResult(
                success=True,
                outcome=RunOutcome.NO_ACTION,
                message=f"No eligible issues found (all have {HANDOFF_MARKER} in latest comment or '{self.config.doing_label}' label)",
            )

        await claim_issue(self.service, selected, self.config.comment_template, self.config.doing_label)
        return RunResult(
            success=True,
            outcome=RunOutcome.PROCESSED,
            message=f"Successfully processed issue #{selected.number}",
            claimed_issue=ClaimedIssue(number=selected.number, title=selected.title),
        )

    def generate_summary(self, result: RunResult) -> str:
        """Render a Markdown summary of a run."""
        lines = ["## Issue Automation Summary", ""]

        if result.outcome == RunOutcome.FAILED:
            lines.append("- Status: **Failed**")
            lines.append(f"- Error: {result.message}")
        elif result.claimed_issue is None:
            status = "**Skipped**" if result.outcome == RunOutcome.SKIPPED else "**No Action**"
            lines.append(f"- Status: {status}")
            lines.append(f"- Action: {result.message}")
        else:
            lines.append("- Status: **Processed**")
            lines.append(f"- Issue: #{result.claimed_issue.number}")
            lines.append(f"- Title: {result.claimed_issue.title}")
            lines.append(f"- Action: Posted automation comment and added '{self.config.doing_label}' label")

        lines.append("")
        lines.append(f"- Timestamp: {result.timestamp}")
        lines.append(f"- Repository: {self.config.repository}")
        lines.append(f"- Script: {SCRIPT_NAME}")
        return "\n".join(lines)


def generate_fatal_summary(error: Exception) -> str:
    """Render the summary printed when the automation cannot start at all."""
    lines = [
        "## Issue Automation Summary",
        "",
        "- Status: **Fatal Error**",
        f"- Error: {error}",
        f"- Timestamp: {utc_timestamp()}",
    ]
    return "\n".join(lines)
