from __future__ import annotations

import logging as py_logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from gitauth.config import GITHUB_TOKEN_ENV_KEYS

_SECURITY_TEST_FILES = {
    "test_credentials.py",
    "test_security.py",
    "test_url.py",
}


@pytest.hookimpl(trylast=True)
def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    del config
    for item in items:
        path = Path(str(getattr(item, "path", item.fspath)))
        name = path.name

        if "integration" in path.parts:
            item.add_marker(pytest.mark.integration)
            item.add_marker(pytest.mark.slow)

        if name in _SECURITY_TEST_FILES:
            item.add_marker(pytest.mark.security)


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for key in GITHUB_TOKEN_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    yield
    logger = py_logging.getLogger("gitauth")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(py_logging.NOTSET)
    logger.propagate = True
