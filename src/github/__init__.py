"""GitHub commit status source for the gate."""

from src.github.client import GitHubStatusClient, parse_statuses
from src.github.context import (
    Revision,
    parse_repository,
    read_pull_request_head_sha,
    resolve_revision,
)


__all__ = [
    "GitHubStatusClient",
    "Revision",
    "parse_repository",
    "parse_statuses",
    "read_pull_request_head_sha",
    "resolve_revision",
]
