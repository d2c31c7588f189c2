"""Clone and credential-configuration command builders."""

from __future__ import annotations

import logging as py_logging
import shlex
from collections.abc import Sequence
from enum import Enum

from gitauth.constants import CREDENTIAL_CACHE_TIMEOUT_SECONDS, DEFAULT_GIT_HOST
from gitauth.errors import ExitCode, GitAuthError
from gitauth.url import inject_token, sanitize_url

logger = py_logging.getLogger(__name__)


class GitConfigScope(str, Enum):
    LOCAL = "local"
    GLOBAL = "global"

    @property
    def flag(self) -> str:
        return f"--{self.value}"


def _require_url(url: str | None) -> str:
    # Only a missing URL is rejected; anything else is passed through as given.
    if not url:
        raise GitAuthError(
            "Repository URL is required.",
            code=ExitCode.INVALID_INPUT,
            hint="Pass the remote URL to clone.",
        )
    return url


def _clone_url(url: str, token: str | None) -> str:
    return inject_token(url, token) if token else url


def _branch_args(branch: str | None) -> list[str]:
    if not branch:
        return []
    return ["--branch", branch, "--single-branch"]


def build_clone_argv(
    url: str | None,
    *,
    token: str | None = None,
    branch: str | None = None,
    target_path: str = "",
) -> list[str]:
    """Return ``git clone`` as an argument vector for exec without a shell."""
    clone_url = _clone_url(_require_url(url), token)
    argv = ["git", "clone", *_branch_args(branch), clone_url]
    if target_path:
        argv.append(str(target_path))
    return argv


def build_clone_command(
    url: str | None,
    *,
    token: str | None = None,
    branch: str | None = None,
    target_path: str = "",
) -> str:
    """Return ``git clone`` as a single command line.

    Only the target path is wrapped in double quotes; nothing else is shell
    escaped. Prefer :func:`build_clone_argv` when the command is executed.
    """
    clone_url = _clone_url(_require_url(url), token)
    parts = ["git", "clone", *_branch_args(branch), clone_url, f'"{target_path}"']
    logger.debug("Built clone command url=%s branch=%s", sanitize_url(clone_url), branch or "")
    return " ".join(parts)


def rewrite_key(token: str, host: str = DEFAULT_GIT_HOST) -> str:
    return f"url.https://{token}@{host}/.insteadOf"


def build_credential_config_commands(
    token: str,
    *,
    scope: GitConfigScope,
    host: str = DEFAULT_GIT_HOST,
    cache_timeout_seconds: int = CREDENTIAL_CACHE_TIMEOUT_SECONDS,
) -> list[list[str]]:
    """Return the ``git config`` invocations that route ``host`` through ``token``."""
    if not token:
        raise GitAuthError(
            "Token is required for credential helper configuration.",
            code=ExitCode.INVALID_INPUT,
            hint="Set GITAUTH_GH_TOKEN or pass --token.",
        )
    scope = GitConfigScope(scope)
    return [
        ["git", "config", scope.flag, rewrite_key(token, host), f"https://{host}/"],
        ["git", "config", scope.flag, "credential.helper", f"cache --timeout={cache_timeout_seconds}"],
    ]


def render_command(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(part) for part in argv)
