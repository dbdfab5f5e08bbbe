"""CLI commands for the status check gate."""

import logging
import sys
import uuid

import click
import structlog

from src.gate.constants import COMPONENT_CLI
from src.gate.errors import ConfigurationError
from src.gate.models import GateConfig
from src.gate.poller import StatusGate
from src.gate.reporter import ConsoleReporter
from src.github.client import GitHubStatusClient
from src.observability.logging import bind_run_context, configure_logging
from src.settings.app import get_settings


logger = structlog.get_logger()


@click.group()
@click.version_option(version="0.1.0")
def cli() -> None:
    """Status check gate CLI."""


@cli.command()
@click.option(
    "--status-regex",
    envvar="INPUT_STATUS-REGEX",
    default="",
    help="Regular expression selecting status contexts (default: all).",
)
@click.option(
    "--expected-checks",
    envvar="INPUT_EXPECTED-CHECKS",
    default="",
    help="Number of matching checks that must succeed.",
)
@click.option(
    "--repository",
    default=None,
    help="Repository as owner/repo (default: GITHUB_REPOSITORY).",
)
@click.option(
    "--sha",
    default=None,
    help="Commit SHA to watch (default: pull request head or GITHUB_SHA).",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=True,
    help="Use JSON format for logs (default: true).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging.",
)
def wait(  # noqa: PLR0913
    status_regex: str,
    expected_checks: str,
    repository: str | None,
    sha: str | None,
    json_logs: bool,
    verbose: bool,
) -> None:
    """Wait until the expected status checks pass.

    Polls the commit statuses of the revision every 30 seconds. Exits 0
    once exactly the expected number of matching checks succeeded, and 1
    as soon as a matching check fails or the inputs are invalid.
    """
    run_id = uuid.uuid4().hex[:12]
    configure_logging(
        level=logging.DEBUG if verbose else logging.INFO,
        json_format=json_logs,
    )
    bind_run_context(run_id)
    log = logger.bind(component=COMPONENT_CLI, command="wait")

    settings = get_settings()
    reporter = ConsoleReporter(
        github_actions=settings.github_actions,
        verbose=verbose,
    )

    try:
        # Inputs are rejected before any revision lookup or token check.
        GateConfig.from_inputs(status_regex, expected_checks)
        fetcher = GitHubStatusClient.from_settings(
            settings,
            repository=repository,
            sha=sha,
            run_id=run_id,
        )
    except ConfigurationError as e:
        log.warning("config_invalid", **e.to_dict())
        reporter.fail(e.message)
        sys.exit(1)

    log.info(
        "gate_run_started",
        repository=fetcher.revision.full_name,
        sha=fetcher.revision.sha,
    )

    gate = StatusGate(fetcher=fetcher, reporter=reporter, run_id=run_id)
    result = gate.run(status_regex, expected_checks)

    log.info(
        "gate_run_finished",
        state=result.state.value,
        polls=result.poll_count,
    )
    sys.exit(0 if result.succeeded else 1)


if __name__ == "__main__":
    cli()
