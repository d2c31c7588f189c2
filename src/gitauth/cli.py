"""Public CLI contract and entrypoint."""

from __future__ import annotations

import argparse
import json
import logging as py_logging
import subprocess
import sys
from collections.abc import Sequence
from pathlib import Path

from .commands import GitConfigScope, build_clone_argv, build_clone_command
from .config import AppConfig, load_config
from .credentials import configure_credential_helper, configure_git_user
from .errors import ExitCode, GitAuthError, user_facing_error
from .git_runner import Runner, is_git_available
from .github import HttpRequester, lookup_username
from .logging import configure_logging, default_log_path
from .url import (
    extract_repo_name,
    inject_token,
    is_valid_git_url,
    parse_git_url,
    sanitize_url,
)

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARN", "ERROR")
_VALID_SCOPES = tuple(scope.value for scope in GitConfigScope)


def _log_level_type(value: str) -> str:
    normalized = value.upper()
    if normalized == "WARNING":
        normalized = "WARN"
    if normalized not in _VALID_LOG_LEVELS:
        accepted = ", ".join(_VALID_LOG_LEVELS)
        raise argparse.ArgumentTypeError(f"--log-level must be one of: {accepted}")
    return normalized


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gitauth")
    parser.add_argument("--config", type=Path, default=None)
    parser.add_argument("--log-level", type=_log_level_type, default=None)
    parser.add_argument("--log-file", type=Path, default=None)
    commands = parser.add_subparsers(dest="command", required=True)

    parse_cmd = commands.add_parser("parse", help="Print the structured form of a remote URL")
    parse_cmd.add_argument("url")

    inject_cmd = commands.add_parser("inject", help="Embed a token into an HTTPS remote URL")
    inject_cmd.add_argument("url")
    inject_cmd.add_argument("--token", default=None)

    sanitize_cmd = commands.add_parser("sanitize", help="Redact credentials from a URL")
    sanitize_cmd.add_argument("url", nargs="?", default="")

    validate_cmd = commands.add_parser("validate", help="Check whether a URL looks like a git remote")
    validate_cmd.add_argument("url")

    name_cmd = commands.add_parser("repo-name", help="Print the repository name of a URL")
    name_cmd.add_argument("url")

    clone_cmd = commands.add_parser("clone-command", help="Print a git clone command")
    clone_cmd.add_argument("url")
    clone_cmd.add_argument("--target", required=True)
    clone_cmd.add_argument("--branch", default=None)
    clone_cmd.add_argument("--token", default=None)
    clone_cmd.add_argument("--argv", action="store_true", help="Print the argument vector as JSON")

    cred_cmd = commands.add_parser("configure-credentials", help="Route git HTTPS access through a token")
    cred_cmd.add_argument("--scope", choices=_VALID_SCOPES, required=True)
    cred_cmd.add_argument("--repo", type=Path, default=None)
    cred_cmd.add_argument("--token", default=None)
    cred_cmd.add_argument("--host", default=None)

    user_cmd = commands.add_parser("configure-user", help="Set user.name and user.email in a repository")
    user_cmd.add_argument("--repo", type=Path, required=True)
    user_cmd.add_argument("--name", default=None)
    user_cmd.add_argument("--email", default=None)

    whoami_cmd = commands.add_parser("whoami", help="Print the GitHub login that owns the token")
    whoami_cmd.add_argument("--token", default=None)

    commands.add_parser("check-git", help="Exit non-zero when git is not installed")
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    return parser.parse_args(argv)


def _token(namespace: argparse.Namespace, config: AppConfig) -> str:
    explicit = getattr(namespace, "token", None)
    return (explicit or config.github_token or "").strip()


def run_command(
    namespace: argparse.Namespace,
    config: AppConfig,
    *,
    runner: Runner = subprocess.run,
    requester: HttpRequester | None = None,
) -> int:
    command = namespace.command

    if command == "parse":
        parsed = parse_git_url(namespace.url)
        if parsed is None:
            raise GitAuthError(
                f"Unrecognized git URL: {sanitize_url(namespace.url)}",
                code=ExitCode.VALIDATION_ERROR,
                hint="Use git@host:owner/repo.git or https://host/owner/repo.git.",
            )
        payload = {
            "host": parsed.host,
            "owner": parsed.owner,
            "repo": parsed.repo,
            "protocol": parsed.protocol.value,
        }
        print(json.dumps(payload, sort_keys=True))
        return int(ExitCode.SUCCESS)

    if command == "inject":
        print(inject_token(namespace.url, _token(namespace, config)))
        return int(ExitCode.SUCCESS)

    if command == "sanitize":
        print(sanitize_url(namespace.url))
        return int(ExitCode.SUCCESS)

    if command == "validate":
        if is_valid_git_url(namespace.url):
            return int(ExitCode.SUCCESS)
        return int(ExitCode.VALIDATION_ERROR)

    if command == "repo-name":
        print(extract_repo_name(namespace.url))
        return int(ExitCode.SUCCESS)

    if command == "clone-command":
        options = {
            "token": _token(namespace, config) or None,
            "branch": namespace.branch,
            "target_path": namespace.target,
        }
        if namespace.argv:
            print(json.dumps(build_clone_argv(namespace.url, **options)))
        else:
            print(build_clone_command(namespace.url, **options))
        return int(ExitCode.SUCCESS)

    if command == "configure-credentials":
        configure_credential_helper(
            _token(namespace, config),
            scope=GitConfigScope(namespace.scope),
            repo_path=namespace.repo,
            host=namespace.host or config.github_host,
            cache_timeout_seconds=config.credential_cache_timeout_seconds,
            timeout_seconds=config.git_timeout_seconds,
            runner=runner,
        )
        return int(ExitCode.SUCCESS)

    if command == "configure-user":
        configure_git_user(
            namespace.repo,
            user_name=namespace.name or config.git_user_name or None,
            user_email=namespace.email or config.git_user_email or None,
            timeout_seconds=config.git_timeout_seconds,
            runner=runner,
        )
        return int(ExitCode.SUCCESS)

    if command == "whoami":
        login = lookup_username(
            _token(namespace, config),
            requester=requester,
            api_url=config.github_api_url,
            timeout_seconds=config.http_timeout_seconds,
        )
        if login is None:
            raise GitAuthError(
                "Could not resolve a GitHub user for the token.",
                code=ExitCode.NETWORK_ERROR,
                hint="Check the token and network access.",
            )
        print(login)
        return int(ExitCode.SUCCESS)

    if command == "check-git":
        if is_git_available(runner=runner, timeout_seconds=config.git_timeout_seconds):
            return int(ExitCode.SUCCESS)
        return int(ExitCode.GIT_ERROR)

    raise GitAuthError(f"Unknown command: {command}", code=ExitCode.INVALID_ARGS)


def main(
    argv: Sequence[str] | None = None,
    *,
    runner: Runner = subprocess.run,
    requester: HttpRequester | None = None,
) -> int:
    log_path = default_log_path()
    logger = configure_logging(log_file=log_path)
    parser = build_parser()
    try:
        namespace = parser.parse_args(argv)
    except SystemExit as exc:
        if exc.code not in (None, 0):
            logger.warning("Argument parsing failed with exit code %s", exc.code)
        return int(exc.code or 0)

    config = load_config(namespace.config)
    if namespace.log_file is not None:
        log_path = namespace.log_file.expanduser()
    logger = configure_logging(level=namespace.log_level or config.log_level, log_file=log_path)

    try:
        logger.debug("Running command=%s", namespace.command)
        return run_command(namespace, config, runner=runner, requester=requester)
    except GitAuthError as exc:
        logger.error(
            "Handled GitAuthError (code=%s): %s",
            int(exc.code),
            exc.message,
            exc_info=logger.isEnabledFor(py_logging.DEBUG),
        )
        print(user_facing_error(exc.message, hint=exc.hint), file=sys.stderr)
        return int(exc.code)
    except Exception:
        logger.exception("Unhandled exception in CLI entrypoint")
        try:
            hint = f"Inspect logs: {log_path}"
            print(user_facing_error("Unexpected runtime failure", hint=hint), file=sys.stderr)
        except Exception:
            pass
        return int(ExitCode.RUNTIME_ERROR)


def run(argv: Sequence[str] | None = None) -> int:
    return main(argv)
