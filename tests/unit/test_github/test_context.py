"""Unit tests for revision resolution."""

import json
from pathlib import Path

import pytest

from src.gate.errors import ConfigurationError
from src.github.context import (
    Revision,
    parse_repository,
    read_pull_request_head_sha,
    resolve_revision,
)
from src.settings.app import AppSettings


GITHUB_ENV_VARS = (
    "GITHUB_TOKEN",
    "GITHUB_REPOSITORY",
    "GITHUB_SHA",
    "GITHUB_EVENT_PATH",
    "GITHUB_API_URL",
    "GITHUB_ACTIONS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the runner's own GitHub variables out of the tests."""
    for name in GITHUB_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def make_settings(**values: str) -> AppSettings:
    """Create settings from alias-named values only."""
    return AppSettings(_env_file=None, **values)  # type: ignore[call-arg]


def write_event(tmp_path: Path, payload: object) -> Path:
    """Write an event payload file."""
    path = tmp_path / "event.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestParseRepository:
    """Tests for parse_repository."""

    def test_owner_repo(self) -> None:
        """owner/repo is split."""
        assert parse_repository("octo-org/hello.world") == ("octo-org", "hello.world")

    @pytest.mark.parametrize("value", ["octo", "octo/repo/extra", "/repo", ""])
    def test_invalid(self, value: str) -> None:
        """Anything other than owner/repo is rejected."""
        with pytest.raises(ConfigurationError):
            parse_repository(value)


class TestReadPullRequestHeadSha:
    """Tests for read_pull_request_head_sha."""

    def test_pull_request_event(self, tmp_path: Path) -> None:
        """The head SHA is read from pull_request events."""
        path = write_event(tmp_path, {"pull_request": {"head": {"sha": "abc123"}}})

        assert read_pull_request_head_sha(path) == "abc123"

    def test_push_event(self, tmp_path: Path) -> None:
        """Non pull_request events yield None."""
        path = write_event(tmp_path, {"ref": "refs/heads/main"})

        assert read_pull_request_head_sha(path) is None

    def test_unreadable(self, tmp_path: Path) -> None:
        """Missing or malformed payloads are configuration errors."""
        broken = tmp_path / "broken.json"
        broken.write_text("{not json", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            read_pull_request_head_sha(tmp_path / "missing.json")
        with pytest.raises(ConfigurationError):
            read_pull_request_head_sha(broken)


class TestResolveRevision:
    """Tests for resolve_revision."""

    def test_prefers_pull_request_head(self, tmp_path: Path) -> None:
        """Pull request head wins over GITHUB_SHA."""
        path = write_event(tmp_path, {"pull_request": {"head": {"sha": "head-sha"}}})
        settings = make_settings(
            GITHUB_REPOSITORY="octo/repo",
            GITHUB_SHA="merge-sha",
            GITHUB_EVENT_PATH=str(path),
        )

        revision = resolve_revision(settings)

        assert revision == Revision(owner="octo", repo="repo", sha="head-sha")
        assert revision.full_name == "octo/repo"

    def test_falls_back_to_github_sha(self, tmp_path: Path) -> None:
        """GITHUB_SHA is used for other events."""
        path = write_event(tmp_path, {"ref": "refs/heads/main"})
        settings = make_settings(
            GITHUB_REPOSITORY="octo/repo",
            GITHUB_SHA="push-sha",
            GITHUB_EVENT_PATH=str(path),
        )

        assert resolve_revision(settings).sha == "push-sha"

    def test_explicit_overrides(self) -> None:
        """Explicit arguments win over settings."""
        settings = make_settings(GITHUB_REPOSITORY="octo/repo", GITHUB_SHA="env-sha")

        revision = resolve_revision(settings, repository="other/thing", sha="cli-sha")

        assert revision == Revision(owner="other", repo="thing", sha="cli-sha")

    def test_missing_repository(self) -> None:
        """A repository is required."""
        with pytest.raises(ConfigurationError, match="GITHUB_REPOSITORY"):
            resolve_revision(make_settings(GITHUB_SHA="abc"))

    def test_missing_sha(self) -> None:
        """A SHA is required."""
        with pytest.raises(ConfigurationError, match="GITHUB_SHA"):
            resolve_revision(make_settings(GITHUB_REPOSITORY="octo/repo"))
