"""Pytest configuration and shared fixtures."""

import logging
import shutil
import tempfile
from pathlib import Path

import pytest

from recordkit import Database
from recordkit.config import ProjectConfig


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep RECORDKIT_* variables from the host out of every test."""
    for name in ("RECORDKIT_PROJECT_DIR", "RECORDKIT_SNAPSHOT_DIR", "RECORDKIT_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture(autouse=True)
def restore_root_logger():
    """CLI runs reconfigure logging; put the root logger back afterwards."""
    root = logging.getLogger()
    level = root.level
    handlers = list(root.handlers)
    yield
    root.setLevel(level)
    root.handlers[:] = handlers


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    temp = tempfile.mkdtemp()
    yield Path(temp)
    shutil.rmtree(temp)


@pytest.fixture
def db(temp_dir):
    """Database with default config whose snapshots land in temp_dir."""
    return Database(config=ProjectConfig(), snapshot_dir=temp_dir)
