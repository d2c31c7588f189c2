"""Git credential helper and commit identity configuration."""

from __future__ import annotations

import logging as py_logging
import subprocess
from pathlib import Path

from gitauth.commands import GitConfigScope, build_credential_config_commands
from gitauth.constants import (
    CREDENTIAL_CACHE_TIMEOUT_SECONDS,
    DEFAULT_GIT_HOST,
    GIT_COMMAND_TIMEOUT_SECONDS,
)
from gitauth.errors import ExitCode, GitAuthError
from gitauth.git_runner import Runner, run_git

logger = py_logging.getLogger(__name__)


def _failure_reason(exc: GitAuthError) -> str:
    if exc.hint:
        return f"{exc.message} {exc.hint}"
    return exc.message


def configure_credential_helper(
    token: str,
    *,
    scope: GitConfigScope,
    repo_path: str | Path | None = None,
    host: str = DEFAULT_GIT_HOST,
    cache_timeout_seconds: int = CREDENTIAL_CACHE_TIMEOUT_SECONDS,
    timeout_seconds: float = GIT_COMMAND_TIMEOUT_SECONDS,
    runner: Runner = subprocess.run,
) -> None:
    """Write the insteadOf rewrite and credential cache for ``host``.

    ``scope`` is mandatory. A local write needs ``repo_path``; a global write
    changes the user's git configuration and must be asked for explicitly.
    """
    scope = GitConfigScope(scope)
    commands = build_credential_config_commands(
        token,
        scope=scope,
        host=host,
        cache_timeout_seconds=cache_timeout_seconds,
    )
    if scope is GitConfigScope.LOCAL and not repo_path:
        raise GitAuthError(
            "Repository path is required for local credential configuration.",
            code=ExitCode.INVALID_INPUT,
            hint="Pass --repo or use --scope global.",
        )
    cwd = repo_path if scope is GitConfigScope.LOCAL else None

    rewrite, helper = commands
    try:
        run_git(rewrite[1:], cwd=cwd, timeout_seconds=timeout_seconds, runner=runner)
        logger.info("Configured %s credential rewrite for host=%s", scope.value, host)

        run_git(helper[1:], cwd=cwd, timeout_seconds=timeout_seconds, runner=runner)
        logger.info(
            "Configured %s credential cache timeout=%ss",
            scope.value,
            cache_timeout_seconds,
        )
    except GitAuthError as exc:
        logger.error("Failed to configure credential helper scope=%s: %s", scope.value, exc.message)
        raise GitAuthError(
            f"Failed to configure credential helper: {_failure_reason(exc)}",
            code=exc.code,
            hint="Check that git is installed and the repository path exists.",
        ) from exc


def configure_git_user(
    repo_path: str | Path | None,
    *,
    user_name: str | None = None,
    user_email: str | None = None,
    timeout_seconds: float = GIT_COMMAND_TIMEOUT_SECONDS,
    runner: Runner = subprocess.run,
) -> None:
    if not repo_path:
        raise GitAuthError(
            "Repository path is required.",
            code=ExitCode.INVALID_INPUT,
            hint="Pass --repo pointing at a git checkout.",
        )

    try:
        if user_name:
            run_git(["config", "user.name", user_name], cwd=repo_path, timeout_seconds=timeout_seconds, runner=runner)
            logger.info("Configured git user.name=%s repo=%s", user_name, repo_path)
        if user_email:
            run_git(
                ["config", "user.email", user_email],
                cwd=repo_path,
                timeout_seconds=timeout_seconds,
                runner=runner,
            )
            logger.info("Configured git user.email=%s repo=%s", user_email, repo_path)
    except GitAuthError as exc:
        logger.error("Failed to configure git user repo=%s: %s", repo_path, exc.message)
        raise GitAuthError(
            f"Failed to configure git user: {_failure_reason(exc)}",
            code=exc.code,
            hint="Check that the repository path is a git checkout.",
        ) from exc
