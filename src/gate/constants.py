"""Constants for the status gate."""

# Fixed wait between poll cycles (seconds)
POLL_INTERVAL_SECONDS = 30

# Configuration error messages
EXPECTED_CHECKS_ERROR = "expected-checks must be a positive number"
STATUS_REGEX_ERROR = "status-regex is not a valid regular expression"

# Per-check line icons
ICON_SUCCESS = "✅"
ICON_FAILURE = "❌"
ICON_PENDING = "⏳"

# Log component names
COMPONENT_GATE = "gate"
COMPONENT_GITHUB = "github"
COMPONENT_CLI = "cli"
