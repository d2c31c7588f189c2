from __future__ import annotations

import io
import json
import subprocess
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

import pytest

from gitauth import cli
from gitauth.errors import ExitCode


def _cp(returncode: int, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


def _run(argv: list[str], tmp_path: Path, **kwargs: object) -> tuple[int, str, str]:
    out = io.StringIO()
    err = io.StringIO()
    with redirect_stdout(out), redirect_stderr(err):
        code = cli.main(["--config", str(tmp_path / "config.toml"), *argv], **kwargs)
    return code, out.getvalue(), err.getvalue()


def test_cli_help_lists_subcommands() -> None:
    help_text = cli.build_parser().format_help()

    for name in ("parse", "inject", "sanitize", "validate", "repo-name", "clone-command"):
        assert name in help_text
    assert "configure-credentials" in help_text
    assert "--log-level" in help_text


def test_missing_subcommand_returns_usage_error(tmp_path: Path) -> None:
    code, _, _ = _run([], tmp_path)

    assert code == 2


def test_parse_prints_json(tmp_path: Path) -> None:
    code, out, _ = _run(["parse", "git@github.com:acme/widget.git"], tmp_path)

    assert code == 0
    assert json.loads(out) == {"host": "github.com", "owner": "acme", "protocol": "ssh", "repo": "widget"}


def test_parse_reports_unrecognized_url(tmp_path: Path) -> None:
    code, _, err = _run(["parse", "https://TOK@github.com/acme/widget.git"], tmp_path)

    assert code == int(ExitCode.VALIDATION_ERROR)
    assert "Error: Unrecognized git URL" in err
    assert "TOK" not in err


def test_inject_uses_env_token(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITAUTH_GH_TOKEN", "envtok")

    code, out, _ = _run(["inject", "https://github.com/acme/widget"], tmp_path)

    assert code == 0
    assert out.strip() == "https://envtok@github.com/acme/widget.git"


def test_inject_flag_overrides_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GH_TOKEN", "envtok")

    _, out, _ = _run(["inject", "https://github.com/acme/widget", "--token", "flagtok"], tmp_path)

    assert out.strip() == "https://flagtok@github.com/acme/widget.git"


def test_sanitize_and_repo_name(tmp_path: Path) -> None:
    _, sanitized, _ = _run(["sanitize", "https://abc@github.com/o/r.git"], tmp_path)
    _, empty, _ = _run(["sanitize"], tmp_path)
    _, name, _ = _run(["repo-name", "https://example.com/a/b/c"], tmp_path)

    assert sanitized.strip() == "https://***@github.com/o/r.git"
    assert empty.strip() == "(no url)"
    assert name.strip() == "c"


def test_validate_exit_codes(tmp_path: Path) -> None:
    assert _run(["validate", "https://github.com/acme/widget"], tmp_path)[0] == 0
    assert _run(["validate", "not a url"], tmp_path)[0] == int(ExitCode.VALIDATION_ERROR)


def test_clone_command_text_and_argv(tmp_path: Path) -> None:
    _, text, _ = _run(
        ["clone-command", "https://github.com/acme/widget.git", "--target", "/w", "--branch", "dev"],
        tmp_path,
    )
    _, argv, _ = _run(
        ["clone-command", "https://github.com/acme/widget.git", "--target", "/w", "--argv"],
        tmp_path,
    )

    assert text.strip() == 'git clone --branch dev --single-branch https://github.com/acme/widget.git "/w"'
    assert json.loads(argv) == ["git", "clone", "https://github.com/acme/widget.git", "/w"]


def test_configure_credentials_requires_scope(tmp_path: Path) -> None:
    code, _, _ = _run(["configure-credentials", "--token", "TOK"], tmp_path)

    assert code == 2


def test_configure_credentials_runs_git(tmp_path: Path) -> None:
    calls: list[list[str]] = []

    def runner(cmd: list[str], **_: object) -> subprocess.CompletedProcess:
        calls.append(cmd)
        return _cp(0)

    code, _, _ = _run(
        ["configure-credentials", "--scope", "local", "--repo", str(tmp_path), "--token", "TOK"],
        tmp_path,
        runner=runner,
    )

    assert code == 0
    assert [cmd[3] for cmd in calls] == ["url.https://TOK@github.com/.insteadOf", "credential.helper"]


def test_configure_credentials_without_token_fails(tmp_path: Path) -> None:
    code, _, err = _run(["configure-credentials", "--scope", "global"], tmp_path, runner=lambda *a, **k: _cp(0))

    assert code == int(ExitCode.INVALID_INPUT)
    assert "Token is required" in err


def test_configure_user_uses_config_defaults(tmp_path: Path) -> None:
    (tmp_path / "config.toml").write_text('git_user_name = "Bot"\n', encoding="utf-8")
    calls: list[list[str]] = []

    def runner(cmd: list[str], **_: object) -> subprocess.CompletedProcess:
        calls.append(cmd)
        return _cp(0)

    code, _, _ = _run(["configure-user", "--repo", str(tmp_path), "--email", "bot@example.com"], tmp_path, runner=runner)

    assert code == 0
    assert calls == [
        ["git", "config", "user.name", "Bot"],
        ["git", "config", "user.email", "bot@example.com"],
    ]


def test_whoami(tmp_path: Path) -> None:
    def requester(*_: object) -> tuple[int, str, dict[str, str]]:
        return 200, '{"login":"octocat"}', {}

    code, out, _ = _run(["whoami", "--token", "TOK"], tmp_path, requester=requester)

    assert code == 0
    assert out.strip() == "octocat"


def test_whoami_failure_is_reported(tmp_path: Path) -> None:
    code, _, err = _run(["whoami", "--token", "TOK"], tmp_path, requester=lambda *_: (401, "", {}))

    assert code == int(ExitCode.NETWORK_ERROR)
    assert "GitHub user" in err


def test_check_git(tmp_path: Path) -> None:
    assert _run(["check-git"], tmp_path, runner=lambda *a, **k: _cp(0, stdout="git version 2"))[0] == 0
    assert _run(["check-git"], tmp_path, runner=lambda *a, **k: _cp(1))[0] == int(ExitCode.GIT_ERROR)


def test_log_level_flag_is_accepted(tmp_path: Path) -> None:
    assert _run(["--log-level", "warning", "sanitize", "x"], tmp_path)[0] == 0
    assert _run(["--log-level", "LOUD", "sanitize", "x"], tmp_path)[0] == 2


def test_unexpected_failure_returns_runtime_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def explode(*_: object, **__: object) -> int:
        raise RuntimeError("boom")

    monkeypatch.setattr(cli, "run_command", explode)

    code, _, err = _run(["sanitize", "x"], tmp_path)

    assert code == int(ExitCode.RUNTIME_ERROR)
    assert "Unexpected runtime failure" in err
