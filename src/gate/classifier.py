"""Classification of a reduced status set."""

from src.gate.models import CheckState, PollOutcome, ReducedSet, StatusReport


def classify(reduced: ReducedSet) -> PollOutcome:
    """Count successful and pending checks, stopping at the first failure.

    Names after a failing check are neither counted nor listed in
    ``evaluated``.

    Args:
        reduced: Latest report per matching name.

    Returns:
        Outcome of the cycle.
    """
    successful = 0
    pending = 0
    evaluated: list[StatusReport] = []

    for report in reduced.values():
        evaluated.append(report)
        state = report.check_state

        if state == CheckState.FAILURE:
            return PollOutcome(
                successful=successful,
                pending=pending,
                total=len(reduced),
                failure=report,
                evaluated=tuple(evaluated),
            )

        if state == CheckState.SUCCESS:
            successful += 1
        else:
            pending += 1

    return PollOutcome(
        successful=successful,
        pending=pending,
        total=len(reduced),
        evaluated=tuple(evaluated),
    )


def is_success(outcome: PollOutcome, expected_checks: int) -> bool:
    """Check whether an outcome satisfies the gate.

    Success requires no failure and exactly ``expected_checks`` successful
    names; more successes than expected is not treated as success.

    Args:
        outcome: Classified cycle outcome.
        expected_checks: Configured number of checks to wait for.

    Returns:
        True if the gate has passed.
    """
    return outcome.failure is None and outcome.successful == expected_checks


def failure_message(report: StatusReport) -> str:
    """Build the terminal message for a failing check.

    Args:
        report: The failing report.

    Returns:
        Message naming the check and any diagnostic detail.
    """
    message = f"❌ Check '{report.name}' failed"
    if report.detail:
        message += f": {report.detail}"
    if report.target_url:
        message += f" ({report.target_url})"
    return message
