"""Token injection, URL sanitization and git credential configuration."""

from .commands import (
    GitConfigScope,
    build_clone_argv,
    build_clone_command,
    build_credential_config_commands,
    render_command,
)
from .credentials import configure_credential_helper, configure_git_user
from .errors import ExitCode, GitAuthError
from .git_runner import is_git_available, run_git
from .github import lookup_username
from .url import (
    GitProtocol,
    ParsedGitUrl,
    extract_repo_name,
    inject_token,
    is_valid_git_url,
    parse_git_url,
    requires_authentication,
    sanitize_url,
)

__all__ = [
    "build_clone_argv",
    "build_clone_command",
    "build_credential_config_commands",
    "configure_credential_helper",
    "configure_git_user",
    "ExitCode",
    "extract_repo_name",
    "GitAuthError",
    "GitConfigScope",
    "GitProtocol",
    "inject_token",
    "is_git_available",
    "is_valid_git_url",
    "lookup_username",
    "ParsedGitUrl",
    "parse_git_url",
    "render_command",
    "requires_authentication",
    "run_git",
    "sanitize_url",
]
