"""Deterministic error model and exit code contract."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from gitauth.security import mask_secrets


class ExitCode(IntEnum):
    SUCCESS = 0
    INVALID_ARGS = 2
    CONFIG_ERROR = 3
    RUNTIME_ERROR = 4
    GIT_ERROR = 5
    VALIDATION_ERROR = 7
    INVALID_INPUT = 9
    NETWORK_ERROR = 10


@dataclass
class GitAuthError(Exception):
    message: str
    code: ExitCode = ExitCode.RUNTIME_ERROR
    hint: str = ""

    def __post_init__(self) -> None:
        # Messages and hints never carry credentials.
        self.message = mask_secrets(self.message)
        self.hint = mask_secrets(self.hint)

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message} Hint: {self.hint}"
        return self.message


def user_facing_error(message: str, *, hint: str = "") -> str:
    if hint:
        return f"Error: {message}. Next step: {hint}"
    return f"Error: {message}."
