"""Resolution of the repository and revision whose statuses are polled."""

import json
import re
from pathlib import Path
from typing import Annotated

import structlog
from pydantic import BaseModel, ConfigDict, Field

from src.gate.constants import COMPONENT_GITHUB
from src.gate.errors import ConfigurationError
from src.settings.app import AppSettings


logger = structlog.get_logger()

REPOSITORY_PATTERN = re.compile(r"^(?P<owner>[^/\s]+)/(?P<repo>[^/\s]+)$")


class Revision(BaseModel):
    """A commit in a GitHub repository."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    owner: Annotated[str, Field(min_length=1)]
    repo: Annotated[str, Field(min_length=1)]
    sha: Annotated[str, Field(min_length=1)]

    @property
    def full_name(self) -> str:
        """Repository as ``owner/repo``."""
        return f"{self.owner}/{self.repo}"


def parse_repository(value: str) -> tuple[str, str]:
    """Split an ``owner/repo`` string.

    Args:
        value: Repository identifier.

    Returns:
        Tuple of (owner, repo).

    Raises:
        ConfigurationError: If the value is not ``owner/repo``.
    """
    match = REPOSITORY_PATTERN.match(value.strip())
    if not match:
        raise ConfigurationError(
            f"Invalid repository '{value}', expected 'owner/repo'",
            field="GITHUB_REPOSITORY",
            value=value,
        )
    return match.group("owner"), match.group("repo")


def read_pull_request_head_sha(event_path: str | Path) -> str | None:
    """Read the pull request head SHA from a workflow event payload.

    Args:
        event_path: Path to the JSON payload GitHub writes for the run.

    Returns:
        Head SHA for pull request events, None for other events.

    Raises:
        ConfigurationError: If the payload cannot be read or parsed.
    """
    try:
        payload = json.loads(Path(event_path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(
            f"Cannot read event payload: {e}",
            field="GITHUB_EVENT_PATH",
            value=str(event_path),
        ) from e

    if not isinstance(payload, dict):
        return None

    pull_request = payload.get("pull_request")
    if not isinstance(pull_request, dict):
        return None

    head = pull_request.get("head") or {}
    sha = head.get("sha") if isinstance(head, dict) else None
    return sha or None


def resolve_revision(
    settings: AppSettings,
    repository: str | None = None,
    sha: str | None = None,
) -> Revision:
    """Determine which revision to poll.

    Explicit arguments win. Otherwise the pull request head SHA from the
    event payload is preferred over ``GITHUB_SHA``, because for
    pull_request events ``GITHUB_SHA`` points at the merge commit.

    Args:
        settings: Environment settings.
        repository: Optional ``owner/repo`` override.
        sha: Optional commit SHA override.

    Returns:
        Resolved revision.

    Raises:
        ConfigurationError: If repository or SHA cannot be determined.
    """
    repository = repository or settings.github_repository
    if not repository:
        raise ConfigurationError(
            "GITHUB_REPOSITORY is required", field="GITHUB_REPOSITORY"
        )
    owner, repo = parse_repository(repository)

    source = "explicit"
    if not sha and settings.github_event_path:
        sha = read_pull_request_head_sha(settings.github_event_path)
        source = "pull_request_head"
    if not sha:
        sha = settings.github_sha
        source = "github_sha"
    if not sha:
        raise ConfigurationError("GITHUB_SHA is required", field="GITHUB_SHA")

    logger.debug(
        "revision_resolved",
        component=COMPONENT_GITHUB,
        repository=f"{owner}/{repo}",
        sha=sha,
        source=source,
    )
    return Revision(owner=owner, repo=repo, sha=sha)
