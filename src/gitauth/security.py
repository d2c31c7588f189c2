"""Security utilities for log sanitization and credential masking."""

from __future__ import annotations

import shlex
from collections.abc import Sequence

from gitauth.constants import (
    AUTH_BEARER_PATTERN,
    DEFAULT_LOG_TRUNCATE_LIMIT,
    GH_TOKEN_PATTERN,
    REDACTED,
    URL_USERINFO_PATTERN,
)


def truncate_log(value: str, limit: int = DEFAULT_LOG_TRUNCATE_LIMIT) -> str:
    """Truncate log text to the specified limit with ellipsis."""
    value = value.strip()
    if len(value) <= limit:
        return value
    return value[: max(0, limit - 3)] + "..."


def mask_secrets(value: str) -> str:
    """Mask bearer headers, URL userinfo and GitHub tokens without truncating."""
    if not value:
        return ""
    masked = AUTH_BEARER_PATTERN.sub(rf"\1 {REDACTED}", value)
    masked = URL_USERINFO_PATTERN.sub(rf"\g<1>{REDACTED}@", masked)
    return GH_TOKEN_PATTERN.sub(REDACTED, masked)


def sanitize_log_text(value: str, limit: int = DEFAULT_LOG_TRUNCATE_LIMIT) -> str:
    """Mask sensitive values and return a bounded-length log string."""
    if not value:
        return ""
    return truncate_log(mask_secrets(value), limit)


def command_for_log(args: Sequence[str]) -> str:
    """Return a shell-safe, credential-masked command string bounded for logging."""
    if not args:
        return ""
    return sanitize_log_text(" ".join(shlex.quote(part) for part in args))
