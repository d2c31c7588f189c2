"""One-shot git process execution with bounded timeouts."""

from __future__ import annotations

import logging as py_logging
import subprocess
from collections.abc import Callable, Sequence
from pathlib import Path

from gitauth.constants import GIT_COMMAND_TIMEOUT_SECONDS
from gitauth.errors import ExitCode, GitAuthError
from gitauth.security import command_for_log, sanitize_log_text

logger = py_logging.getLogger(__name__)

Runner = Callable[..., subprocess.CompletedProcess]


def run_git(
    args: Sequence[str],
    *,
    cwd: str | Path | None = None,
    timeout_seconds: float = GIT_COMMAND_TIMEOUT_SECONDS,
    runner: Runner = subprocess.run,
) -> subprocess.CompletedProcess:
    """Run ``git <args>`` once; any failure is raised as ``GitAuthError``."""
    command = ["git", *args]
    rendered = command_for_log(command)
    logger.debug("Running git command=%s cwd=%s timeout=%ss", rendered, cwd or "", timeout_seconds)
    try:
        result = runner(
            command,
            cwd=str(cwd) if cwd is not None else None,
            capture_output=True,
            text=True,
            check=False,
            timeout=timeout_seconds,
        )
    except subprocess.TimeoutExpired as exc:
        logger.error("Git command timed out command=%s timeout=%ss", rendered, timeout_seconds)
        raise GitAuthError(
            f"Git command timed out after {timeout_seconds}s.",
            code=ExitCode.GIT_ERROR,
            hint=rendered,
        ) from exc
    except OSError as exc:
        logger.error("Git command could not start command=%s error=%s", rendered, exc)
        raise GitAuthError(
            "Git executable could not be started.",
            code=ExitCode.GIT_ERROR,
            hint=sanitize_log_text(str(exc)) or "Install git and make sure it is on PATH.",
        ) from exc

    if result.returncode != 0:
        stderr = sanitize_log_text(result.stderr or "")
        logger.error("Git command failed command=%s code=%s stderr=%s", rendered, result.returncode, stderr)
        raise GitAuthError(
            f"Git command failed with exit code {result.returncode}.",
            code=ExitCode.GIT_ERROR,
            hint=stderr or rendered,
        )

    logger.debug("Git command completed command=%s", rendered)
    return result


def is_git_available(
    *,
    runner: Runner = subprocess.run,
    timeout_seconds: float = GIT_COMMAND_TIMEOUT_SECONDS,
) -> bool:
    try:
        run_git(["--version"], timeout_seconds=timeout_seconds, runner=runner)
    except GitAuthError:
        return False
    return True
