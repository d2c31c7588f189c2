"""Git remote URL parsing, token injection and sanitization."""

from __future__ import annotations

import logging as py_logging
from dataclasses import dataclass
from enum import Enum

from gitauth.constants import (
    HTTP_REPO_PATTERN,
    HTTPS_CREDENTIAL_PATTERN,
    NO_URL_PLACEHOLDER,
    REDACTED,
    SSH_SHORTHAND_PATTERN,
    VALID_GIT_URL_PATTERNS,
)

logger = py_logging.getLogger(__name__)

_GIT_SUFFIX = ".git"
# Characters that terminate the userinfo part of a URL.
_USERINFO_TERMINATORS = frozenset("@/")


class GitProtocol(str, Enum):
    SSH = "ssh"
    HTTPS = "https"


@dataclass(frozen=True)
class ParsedGitUrl:
    host: str
    owner: str
    repo: str
    protocol: GitProtocol
    original: str

    def https_url(self, token: str = "") -> str:
        """Canonical HTTPS form, always ending in ``.git``."""
        userinfo = f"{token}@" if token else ""
        return f"https://{userinfo}{self.host}/{self.owner}/{self.repo}{_GIT_SUFFIX}"


def _strip_git_suffix(value: str) -> str:
    if value.endswith(_GIT_SUFFIX):
        return value[: -len(_GIT_SUFFIX)]
    return value


def parse_git_url(url: object) -> ParsedGitUrl | None:
    """Parse SSH shorthand or HTTP(S) remote URLs; anything else yields ``None``."""
    if not url or not isinstance(url, str):
        return None

    for pattern, protocol in (
        (SSH_SHORTHAND_PATTERN, GitProtocol.SSH),
        (HTTP_REPO_PATTERN, GitProtocol.HTTPS),
    ):
        match = pattern.fullmatch(url)
        if match is None:
            continue
        repo = _strip_git_suffix(match.group("repo"))
        if not repo:
            return None
        return ParsedGitUrl(
            host=match.group("host"),
            owner=match.group("owner"),
            repo=repo,
            protocol=protocol,
            original=url,
        )
    return None


def _embeddable(token: str) -> bool:
    return not any(char in _USERINFO_TERMINATORS or char.isspace() for char in token)


def inject_token(url: str, token: str | None) -> str:
    """Embed ``token`` into an HTTPS remote URL; other input is returned unchanged."""
    if not url or not token:
        return url

    if not _embeddable(token):
        logger.warning("Token cannot be embedded in a URL; leaving url=%s unchanged", sanitize_url(url))
        return url

    parsed = parse_git_url(url)
    if parsed is None:
        logger.warning("Unable to parse URL for token injection url=%s", sanitize_url(url))
        return url

    if parsed.protocol is not GitProtocol.HTTPS:
        logger.warning(
            "Token injection only supported for HTTPS URLs protocol=%s url=%s",
            parsed.protocol.value,
            sanitize_url(url),
        )
        return url

    return parsed.https_url(token)


def sanitize_url(url: str | None) -> str:
    """Redact the credential portion of an ``https://`` URL for display."""
    if not url:
        return NO_URL_PLACEHOLDER
    return HTTPS_CREDENTIAL_PATTERN.sub(f"https://{REDACTED}@", str(url), count=1)


def is_valid_git_url(url: object) -> bool:
    """Loose pre-filter for remote URLs; does not guarantee ``parse_git_url`` succeeds."""
    if not url or not isinstance(url, str):
        return False
    return any(pattern.search(url) for pattern in VALID_GIT_URL_PATTERNS)


def extract_repo_name(url: str) -> str:
    parsed = parse_git_url(url)
    if parsed is not None:
        return parsed.repo

    # Best effort: last non-empty path segment.
    segments = [segment for segment in _strip_git_suffix(url or "").split("/") if segment]
    return segments[-1] if segments else ""


def requires_authentication(url: str) -> bool:
    """Whether credentials may be needed for ``url``.

    Visibility of a remote cannot be known without contacting it, so callers
    always treat a remote as possibly private.
    """
    del url
    return True
