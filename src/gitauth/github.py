"""GitHub identity lookup for a personal access token."""

from __future__ import annotations

import json
import logging as py_logging
from http.client import HTTPException
from typing import Protocol
from urllib.error import HTTPError, URLError
from urllib.parse import urlparse
from urllib.request import Request, urlopen

from gitauth.constants import (
    GITHUB_API_TIMEOUT_SECONDS,
    GITHUB_API_URL,
    GITHUB_API_VERSION,
    USER_AGENT,
)
from gitauth.errors import ExitCode, GitAuthError

logger = py_logging.getLogger(__name__)

HttpResponse = tuple[int, str, dict[str, str]]


class HttpRequester(Protocol):
    def __call__(self, url: str, headers: dict[str, str], timeout: float) -> HttpResponse: ...


def _validate_api_url(url: str) -> None:
    parsed = urlparse(url)
    if parsed.scheme != "https" or not parsed.netloc:
        raise GitAuthError(
            "Invalid GitHub API address.",
            code=ExitCode.VALIDATION_ERROR,
            hint="Only https:// API endpoints are supported.",
        )


def _default_requester(url: str, headers: dict[str, str], timeout: float) -> HttpResponse:
    _validate_api_url(url)
    request = Request(url, headers=headers, method="GET")
    try:
        with urlopen(request, timeout=timeout) as response:  # nosec B310
            status = int(getattr(response, "status", response.getcode()))
            body = response.read().decode("utf-8")
            response_headers = {key.lower(): value for key, value in response.headers.items()}
            return status, body, response_headers
    except HTTPError as exc:
        payload = ""
        if exc.fp is not None:
            payload = exc.read().decode("utf-8", errors="replace")
        response_headers = {key.lower(): value for key, value in (exc.headers.items() if exc.headers else [])}
        return exc.code, payload, response_headers
    except (URLError, TimeoutError) as exc:
        reason = getattr(exc, "reason", exc)
        raise GitAuthError(
            "GitHub API connection failed.",
            code=ExitCode.NETWORK_ERROR,
            hint=str(reason) or "Check network connectivity.",
        ) from exc


def build_headers(token: str) -> dict[str, str]:
    return {
        "Accept": "application/vnd.github+json",
        "Authorization": f"Bearer {token}",
        "X-GitHub-Api-Version": GITHUB_API_VERSION,
        "User-Agent": USER_AGENT,
    }


def lookup_username(
    token: str,
    *,
    requester: HttpRequester | None = None,
    api_url: str = GITHUB_API_URL,
    timeout_seconds: float = GITHUB_API_TIMEOUT_SECONDS,
) -> str | None:
    """Return the login that owns ``token``, or ``None`` on any failure."""
    token_value = (token or "").strip()
    if not token_value:
        return None

    do_request = requester or _default_requester
    url = f"{api_url.rstrip('/')}/user"
    try:
        status, payload, _ = do_request(url, build_headers(token_value), timeout_seconds)
    except (GitAuthError, HTTPException, OSError, ValueError) as exc:
        logger.warning("Failed to look up GitHub username: %s", exc)
        return None

    if status != 200:
        logger.debug("GitHub user lookup returned HTTP %s", status)
        return None

    try:
        data = json.loads(payload)
    except (ValueError, RecursionError):
        logger.warning("GitHub user payload was not valid JSON")
        return None

    if not isinstance(data, dict):
        return None
    login = data.get("login")
    if isinstance(login, str) and login:
        return login
    return None
