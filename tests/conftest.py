# tests/conftest.py
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from jira2pdf.config import Settings
from jira2pdf.parse import Issue


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        base_url="https://jira.example.com",
        username="tester",
        password="secret",
        output_dir=tmp_path,
        timeout_s=5.0,
    )


@pytest.fixture(autouse=True)
def _clean_credentials(monkeypatch):
    # keep a developer's real credentials out of the tests
    monkeypatch.delenv("J2P_USERNAME", raising=False)
    monkeypatch.delenv("J2P_PASSWORD", raising=False)


def make_issues(n: int, project: str = "ABC") -> list[Issue]:
    return [Issue(id=str(10000 + i), key=f"{project}-{i + 1}", summary=f"Issue {i + 1}") for i in range(n)]


@pytest.fixture(autouse=True)
def _restore_logging():
    # setup_logging_from_env() reconfigures the root logger
    root = logging.getLogger()
    level = root.level
    factory = logging.getLogRecordFactory()
    yield
    for h in list(root.handlers):
        if type(h) in (logging.StreamHandler, RotatingFileHandler):
            root.removeHandler(h)
            h.close()
    root.setLevel(level)
    logging.setLogRecordFactory(factory)
