"""GitHub commit status client.

Fetches the statuses attached to one revision through the REST API and
maps them to StatusReport values for the gate.

API documentation: https://docs.github.com/en/rest/commits/statuses
"""

import time
from collections.abc import Callable
from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from src.fetch.classify import classify_http_status, classify_transport_exception
from src.fetch.constants import (
    DEFAULT_TIMEOUT_SECONDS,
    HTTP_STATUS_FORBIDDEN,
    HTTP_STATUS_UNAUTHORIZED,
    MAX_RETRY_AFTER_SECONDS,
)
from src.fetch.models import FetchError, FetchErrorClass, RetryPolicy
from src.fetch.redact import redact_headers
from src.gate.constants import COMPONENT_GITHUB
from src.gate.errors import ConfigurationError, TransportError
from src.gate.models import StatusReport
from src.github.constants import (
    AUTH_ERROR_HINT,
    FIELD_CONTEXT,
    FIELD_CREATED_AT,
    FIELD_DESCRIPTION,
    FIELD_STATE,
    FIELD_TARGET_URL,
    GITHUB_ACCEPT_HEADER,
    GITHUB_API_VERSION,
    GITHUB_STATUSES_PATH,
    GITHUB_STATUSES_PER_PAGE,
    GITHUB_USER_AGENT,
)
from src.github.context import Revision, resolve_revision
from src.settings.app import DEFAULT_GITHUB_API_URL, AppSettings


logger = structlog.get_logger()


def parse_statuses(payload: Any) -> list[StatusReport]:  # noqa: ANN401
    """Map a statuses API payload to status reports.

    Args:
        payload: Decoded JSON body.

    Returns:
        Reports in the order returned by the API.

    Raises:
        TransportError: If the payload does not have the expected shape.
    """
    if not isinstance(payload, list):
        error = FetchError(
            error_class=FetchErrorClass.INVALID_PAYLOAD,
            message=f"Expected a JSON array of statuses, got {type(payload).__name__}",
        )
        raise TransportError(error.message, fetch_error=error)

    reports: list[StatusReport] = []
    for entry in payload:
        if not isinstance(entry, dict):
            error = FetchError(
                error_class=FetchErrorClass.INVALID_PAYLOAD,
                message="Status entry is not a JSON object",
            )
            raise TransportError(error.message, fetch_error=error)

        try:
            reports.append(
                StatusReport(
                    name=entry.get(FIELD_CONTEXT),
                    state=entry.get(FIELD_STATE),
                    observed_at=entry.get(FIELD_CREATED_AT),
                    detail=entry.get(FIELD_DESCRIPTION) or None,
                    target_url=entry.get(FIELD_TARGET_URL) or None,
                )
            )
        except ValidationError as e:
            error = FetchError(
                error_class=FetchErrorClass.INVALID_PAYLOAD,
                message=f"Malformed status entry: {e.error_count()} validation errors",
            )
            raise TransportError(error.message, fetch_error=error) from e

    return reports


class GitHubStatusClient:
    """Reads commit statuses for a revision.

    Transport failures (timeouts, connection errors, 5xx, 429) are
    retried according to the RetryPolicy. Anything that still fails is
    raised as TransportError and ends the gate run.
    """

    def __init__(  # noqa: PLR0913
        self,
        token: str | None,
        revision: Revision,
        api_url: str = DEFAULT_GITHUB_API_URL,
        retry_policy: RetryPolicy | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
        run_id: str = "",
    ) -> None:
        """Initialize the client.

        Args:
            token: GitHub token with read access to commit statuses.
            revision: Revision whose statuses are fetched.
            api_url: Base URL of the GitHub REST API.
            retry_policy: Transport-level retry policy.
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport (for testing).
            sleep: Wait primitive used between retries.
            run_id: Run identifier for logging.

        Raises:
            ConfigurationError: If no token is provided.
        """
        if not token:
            raise ConfigurationError("GITHUB_TOKEN is required", field="GITHUB_TOKEN")

        self._token = token
        self._revision = revision
        self._api_url = api_url.rstrip("/")
        self._retry_policy = retry_policy or RetryPolicy()
        self._timeout = timeout
        self._transport = transport
        self._sleep = sleep
        self._log = logger.bind(
            component=COMPONENT_GITHUB,
            run_id=run_id,
            repository=revision.full_name,
            sha=revision.sha,
        )

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings,
        repository: str | None = None,
        sha: str | None = None,
        run_id: str = "",
    ) -> "GitHubStatusClient":
        """Create a client from environment settings.

        Args:
            settings: Environment settings.
            repository: Optional ``owner/repo`` override.
            sha: Optional commit SHA override.
            run_id: Run identifier for logging.

        Returns:
            Configured client.

        Raises:
            ConfigurationError: If the token or revision is missing.
        """
        if not settings.github_token:
            raise ConfigurationError("GITHUB_TOKEN is required", field="GITHUB_TOKEN")

        revision = resolve_revision(settings, repository=repository, sha=sha)
        return cls(
            token=settings.github_token,
            revision=revision,
            api_url=settings.github_api_url,
            run_id=run_id,
        )

    @property
    def revision(self) -> Revision:
        """Get the revision being polled."""
        return self._revision

    @property
    def statuses_url(self) -> str:
        """Full URL of the statuses endpoint for the revision."""
        path = GITHUB_STATUSES_PATH.format(
            owner=self._revision.owner,
            repo=self._revision.repo,
            ref=self._revision.sha,
        )
        return f"{self._api_url}{path}"

    def fetch_statuses(self) -> list[StatusReport]:
        """Fetch all statuses currently visible for the revision.

        Returns:
            Reports in the order returned by the API.

        Raises:
            TransportError: If the request fails or the payload is malformed.
        """
        response = self._execute_with_retry()

        try:
            payload = response.json()
        except ValueError as e:
            error = FetchError(
                error_class=FetchErrorClass.INVALID_PAYLOAD,
                message=f"Response is not valid JSON: {e}",
                status_code=response.status_code,
            )
            raise TransportError(error.message, fetch_error=error) from e

        reports = parse_statuses(payload)
        self._log.debug("statuses_fetched", count=len(reports))
        return reports

    def _build_headers(self) -> dict[str, str]:
        return {
            "Accept": GITHUB_ACCEPT_HEADER,
            "Authorization": f"Bearer {self._token}",
            "User-Agent": GITHUB_USER_AGENT,
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }

    def _execute_with_retry(self) -> httpx.Response:
        """Execute the statuses request with retry logic.

        Returns:
            Successful HTTP response.

        Raises:
            TransportError: If all attempts fail or the error is not retryable.
        """
        headers = self._build_headers()
        params = {"per_page": str(GITHUB_STATUSES_PER_PAGE)}
        policy = self._retry_policy
        log = self._log.bind(url=self.statuses_url, headers=redact_headers(headers))

        with httpx.Client(
            timeout=self._timeout,
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            attempt = 0
            while True:
                result = self._execute_single(client, headers, params)
                if isinstance(result, httpx.Response):
                    log.debug(
                        "statuses_request_complete",
                        attempt=attempt,
                        status_code=result.status_code,
                    )
                    return result

                error = result
                if not policy.should_retry(error, attempt):
                    log.warning(
                        "statuses_request_failed",
                        attempt=attempt,
                        error_class=error.error_class.value,
                        status_code=error.status_code,
                    )
                    raise TransportError(
                        self._failure_message(error), fetch_error=error
                    )

                delay_seconds = policy.get_delay_ms(attempt) / 1000.0
                rate_limited = error.error_class == FetchErrorClass.RATE_LIMITED
                if rate_limited and error.retry_after:
                    delay_seconds = float(
                        min(error.retry_after, MAX_RETRY_AFTER_SECONDS)
                    )

                log.info(
                    "retry_attempt",
                    attempt=attempt + 1,
                    max_retries=policy.max_retries,
                    delay_seconds=delay_seconds,
                    error_class=error.error_class.value,
                )
                self._sleep(delay_seconds)
                attempt += 1

    def _execute_single(
        self,
        client: httpx.Client,
        headers: dict[str, str],
        params: dict[str, str],
    ) -> httpx.Response | FetchError:
        """Execute a single request.

        Returns:
            The response on 2xx, otherwise the classified error.
        """
        try:
            response = client.get(self.statuses_url, headers=headers, params=params)
        except httpx.HTTPError as e:
            return classify_transport_exception(e)

        error = classify_http_status(response.status_code, response.headers)
        return error or response

    def _failure_message(self, error: FetchError) -> str:
        message = (
            f"Failed to fetch statuses for {self._revision.full_name}"
            f"@{self._revision.sha}: {error.message}"
        )
        if error.status_code in {HTTP_STATUS_UNAUTHORIZED, HTTP_STATUS_FORBIDDEN}:
            message += f". {AUTH_ERROR_HINT}"
        return message
