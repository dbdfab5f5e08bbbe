"""Reporting sinks for human-readable gate progress."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol, runtime_checkable

import click


@runtime_checkable
class Reporter(Protocol):
    """Protocol for one-way progress output.

    The gate writes configuration echo, per-cycle summaries, per-check
    lines and the final message through ``info``; the terminal failure
    goes through ``fail`` exactly once.
    """

    def info(self, line: str) -> None:
        """Write a progress line."""
        ...

    def debug(self, line: str) -> None:
        """Write a diagnostic line."""
        ...

    def fail(self, message: str) -> None:
        """Signal the terminal failure message."""
        ...


def format_timestamp(now: datetime) -> str:
    """Format a timestamp prefix for header lines.

    Args:
        now: Timestamp to format; naive values are taken as UTC.

    Returns:
        Prefix like ``[2025-02-22T09:41:24.000Z]``.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    now = now.astimezone(UTC)
    return f"[{now.strftime('%Y-%m-%dT%H:%M:%S')}.{now.microsecond // 1000:03d}Z]"


def escape_workflow_data(value: str) -> str:
    """Escape a message for a GitHub Actions workflow command.

    Args:
        value: Raw message.

    Returns:
        Message safe to place after ``::error::``.
    """
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class ConsoleReporter:
    """Writes progress to the terminal via click.

    Inside GitHub Actions, failures and debug lines are emitted as
    workflow commands so they show up as annotations and step debug
    output.
    """

    def __init__(self, github_actions: bool = False, verbose: bool = False) -> None:
        """Initialize the console reporter.

        Args:
            github_actions: Whether to emit workflow commands.
            verbose: Whether to print debug lines outside GitHub Actions.
        """
        self._github_actions = github_actions
        self._verbose = verbose

    def info(self, line: str) -> None:
        """Write a progress line to stdout."""
        click.echo(line)

    def debug(self, line: str) -> None:
        """Write a diagnostic line if enabled."""
        if self._github_actions:
            click.echo(f"::debug::{escape_workflow_data(line)}")
        elif self._verbose:
            click.echo(line, err=True)

    def fail(self, message: str) -> None:
        """Write the failure message."""
        if self._github_actions:
            click.echo(f"::error::{escape_workflow_data(message)}")
        else:
            click.echo(message, err=True)


@dataclass
class RecordingReporter:
    """Reporter that keeps every line in memory."""

    lines: list[str] = field(default_factory=list)
    debug_lines: list[str] = field(default_factory=list)
    failures: list[str] = field(default_factory=list)

    def info(self, line: str) -> None:
        """Record a progress line."""
        self.lines.append(line)

    def debug(self, line: str) -> None:
        """Record a diagnostic line."""
        self.debug_lines.append(line)

    def fail(self, message: str) -> None:
        """Record the failure message."""
        self.failures.append(message)
