"""Shared fixtures for liteshell tests."""

import os

import pytest

from liteshell.log import configure_logging


@pytest.fixture(autouse=True, scope="session")
def _quiet_logging():
    """Keep diagnostics off the standard streams the tests inspect."""
    configure_logging("WARNING")


@pytest.fixture
def workdir(tmp_path):
    """A scratch directory with a home directory inside it."""
    (tmp_path / "home").mkdir()
    return tmp_path


@pytest.fixture
def shell_env(workdir):
    """Minimal environment for a Shell running in workdir."""
    return {
        "PATH": os.environ.get("PATH", "/usr/bin:/bin"),
        "HOME": str(workdir / "home"),
    }
