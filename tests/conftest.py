"""Shared test fixtures: isolated cwd/env and a CLI runner."""

from __future__ import annotations

import logging

import pytest
import structlog
from click.testing import CliRunner


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Run each test in an empty directory with no CLEANURLS_* variables set."""
    monkeypatch.chdir(tmp_path)
    for var in ("CLEANURLS_LOG_DIR", "CLEANURLS_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    yield
    logging.getLogger().handlers.clear()
    structlog.reset_defaults()


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()
