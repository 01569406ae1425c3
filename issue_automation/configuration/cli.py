"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
import sys

import structlog
import typer
from dotenv import load_dotenv
from typer import Option
from typing_extensions import Annotated

from issue_automation.automation.controller import generate_fatal_summary
from issue_automation.automation.driver import run_automation_daemon, run_automation_once
from issue_automation.configuration.exceptions import ConfigurationError
from issue_automation.configuration.reconcile import reconcile_automation_configuration
from issue_automation.utils.logging import configure_logging

load_dotenv()

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

typer_app = typer.Typer(pretty_exceptions_show_locals=False, add_completion=False)


def echo_summary(summary: str) -> None:
    """Print a run summary to standard output."""
    typer.echo(summary)


@typer_app.command()
def automation_cli(
    daemon: Annotated[bool, Option("--daemon", "-d", help="Run in daemon mode (continuous monitoring).")] = False,
    interval: Annotated[float | None, Option("--interval", "-i", help="Daemon interval in seconds (default: 300).")] = None,
    repo: Annotated[str | None, Option("--repo", help="Repository name (owner/repo). Overrides GITHUB_OWNER and GITHUB_REPO.")] = None,
    debug: Annotated[bool, Option("--debug", help="Enable debug logging.")] = False,
) -> None:
    """Hand off the newest eligible task-labeled GitHub issue to the external agent.

    Runs once and exits by default. Configuration is read from the environment
    (and a .env file); the options above override it.
    """
    configure_logging(debug)
    logger.info("Loading configuration")
    try:
        config = reconcile_automation_configuration(
            cli_repo=repo,
            cli_daemon=daemon,
            cli_interval_seconds=interval,
            cli_debug=debug,
        )
    except ConfigurationError as exc:
        logger.error("Fatal error", error=str(exc))
        typer.echo(generate_fatal_summary(exc), err=True)
        raise typer.Exit(1) from exc

    if config.debug and not debug:
        configure_logging(True)
    logger.info("Configuration loaded successfully", repository=config.repository)

    if config.daemon_mode:
        asyncio.run(run_automation_daemon(config, echo_summary))
        raise typer.Exit(0)

    result = asyncio.run(run_automation_once(config, echo_summary))
    raise typer.Exit(0 if result.success else 1)


def main() -> None:
    """Entry point that reports malformed arguments with exit code 1 instead of the usual usage code 2."""
    try:
        typer_app()
    except SystemExit as exc:
        if exc.code == 2:
            sys.exit(1)
        raise


if __name__ == "__main__":
    main()
