"""Constants for the GitHub commit status source."""

# REST API path for the statuses of a single ref
GITHUB_STATUSES_PATH = "/repos/{owner}/{repo}/commits/{ref}/statuses"

# Single page of results; older entries beyond it are not requested
GITHUB_STATUSES_PER_PAGE = 100

GITHUB_ACCEPT_HEADER = "application/vnd.github+json"
GITHUB_API_VERSION = "2022-11-28"
GITHUB_USER_AGENT = "status-check-gate/0.1.0"

# Payload field names
FIELD_CONTEXT = "context"
FIELD_STATE = "state"
FIELD_CREATED_AT = "created_at"
FIELD_DESCRIPTION = "description"
FIELD_TARGET_URL = "target_url"

# Shown on 401/403 responses
AUTH_ERROR_HINT = (
    "Check that GITHUB_TOKEN is set and has the 'statuses: read' permission."
)
