"""Wires configuration, the GitHub adapter and the automation together for the CLI."""

from typing import Callable

import structlog

from issue_automation.automation.controller import IssueAutomation
from issue_automation.automation.daemon import DaemonScheduler
from issue_automation.automation.results import RunResult
from issue_automation.configuration.models import AutomationConfig
from issue_automation.github.adapter import GitHubKitAdapter

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

Reporter = Callable[[str], None]


async def build_issue_automation(config: AutomationConfig) -> IssueAutomation:
    """Create the GitHub adapter for the configured repository and wrap it in an IssueAutomation."""
    github_adapter = await GitHubKitAdapter.create(
        owner=config.owner,
        repo_name=config.repo,
        github_token=config.github_token,
        github_api_url=config.github_api_url,
        max_issues_per_run=config.max_issues_per_run,
    )
    return IssueAutomation(config, github_adapter)


async def run_and_report(automation: IssueAutomation, report: Reporter) -> RunResult:
    """Run the automation once and hand its summary to the reporter."""
    result = await automation.run()
    report("\n" + automation.generate_summary(result))
    return result


async def run_automation_once(config: AutomationConfig, report: Reporter) -> RunResult:
    """Run a single pass of the automation."""
    automation = await build_issue_automation(config)
    return await run_and_report(automation, report)


async def run_automation_daemon(config: AutomationConfig, report: Reporter) -> DaemonScheduler:
    """Run the automation on the configured interval until a shutdown signal arrives."""
    automation = await build_issue_automation(config)

    async def tick() -> None:
        await run_and_report(automation, report)

    scheduler = DaemonScheduler(tick, config.daemon_interval_ms)
    scheduler.install_signal_handlers()
    logger.info("Press Ctrl+C to stop gracefully")
    await scheduler.start()
    return scheduler
