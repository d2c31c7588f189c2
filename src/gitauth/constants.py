"""Shared constants: timeouts, defaults and compiled URL patterns."""

from __future__ import annotations

import re

# =============================================================================
# TIMEOUT CONSTANTS (in seconds)
# =============================================================================

GIT_COMMAND_TIMEOUT_SECONDS: int = 5
GITHUB_API_TIMEOUT_SECONDS: int = 5
CREDENTIAL_CACHE_TIMEOUT_SECONDS: int = 3600

# =============================================================================
# LIMIT CONSTANTS
# =============================================================================

DEFAULT_LOG_TRUNCATE_LIMIT: int = 700

# =============================================================================
# GITHUB DEFAULTS
# =============================================================================

DEFAULT_GIT_HOST: str = "github.com"
GITHUB_API_URL: str = "https://api.github.com"
GITHUB_API_VERSION: str = "2022-11-28"
USER_AGENT: str = "gitauth"

# =============================================================================
# PLACEHOLDERS
# =============================================================================

NO_URL_PLACEHOLDER: str = "(no url)"
REDACTED: str = "***"

# =============================================================================
# REGEX PATTERNS (compiled at module level)
# =============================================================================

SSH_SHORTHAND_PATTERN: re.Pattern[str] = re.compile(
    r"git@(?P<host>[A-Za-z0-9_.-]+):(?P<owner>[A-Za-z0-9_-]+)/(?P<repo>[A-Za-z0-9_.-]+)",
)

HTTP_REPO_PATTERN: re.Pattern[str] = re.compile(
    r"https?://(?P<host>[A-Za-z0-9_.-]+)/(?P<owner>[A-Za-z0-9_-]+)/(?P<repo>[A-Za-z0-9_.-]+)",
)

HTTPS_CREDENTIAL_PATTERN: re.Pattern[str] = re.compile(r"https://[^@]+@")

VALID_GIT_URL_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^https?://.+\.git\Z"),
    re.compile(r"^https?://github\.com/[A-Za-z0-9_-]+/[A-Za-z0-9_.-]+"),
    re.compile(r"^https?://gitlab\.com/[A-Za-z0-9_-]+/[A-Za-z0-9_.-]+"),
    re.compile(r"^https?://bitbucket\.org/[A-Za-z0-9_-]+/[A-Za-z0-9_.-]+"),
    re.compile(r"^git@.+:.+\.git\Z"),
)

AUTH_BEARER_PATTERN: re.Pattern[str] = re.compile(
    r"(Authorization:\s*Bearer)\s+\S+",
    re.IGNORECASE,
)

URL_USERINFO_PATTERN: re.Pattern[str] = re.compile(
    r"(https?://)[^/\s@]+@",
)

GH_TOKEN_PATTERN: re.Pattern[str] = re.compile(
    r"\bgh[pousr]_[A-Za-z0-9_]+\b",
)
