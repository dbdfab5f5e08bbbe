"""Reduction of status reports to one authoritative report per name."""

from collections.abc import Iterable

from src.gate.models import ReducedSet, StatusReport


def reduce_latest(reports: Iterable[StatusReport]) -> ReducedSet:
    """Keep the most recent report for each check name.

    A report replaces the stored one when its timestamp is not older.
    For equal timestamps the report appearing later in the input wins,
    so the result is deterministic for a given input order.

    Args:
        reports: Reports in the order returned by the source.

    Returns:
        Mapping of name to latest report, in first-appearance order.
    """
    latest: ReducedSet = {}

    for report in reports:
        current = latest.get(report.name)
        if current is None or report.observed_at >= current.observed_at:
            latest[report.name] = report

    return latest
