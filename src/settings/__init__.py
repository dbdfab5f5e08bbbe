"""Application settings loading."""

from .app import DEFAULT_GITHUB_API_URL, AppSettings, get_settings


__all__ = ["DEFAULT_GITHUB_API_URL", "AppSettings", "get_settings"]
