"""Test configuration and fixtures for backuplist."""

import logging
import textwrap

import pytest


def pytest_addoption(parser):
    """Add custom command-line options for tests."""
    parser.addoption("--run-cli-tests", action="store_true", default=False, help="Run CLI integration tests (slow)")


@pytest.fixture
def srv_root(tmp_path, monkeypatch):
    """Create a root directory with a small data tree and make it the working directory.

    Backup and exclusion directory names are checked relative to the working
    directory when a configuration is parsed, so tests run from inside the root.

    Layout::

        srv/
        ├── data/
        │   ├── a.txt
        │   └── tmp/
        │       └── b.txt
        └── etc/
            └── hosts
    """
    root = tmp_path / "srv"
    (root / "data" / "tmp").mkdir(parents=True)
    (root / "data" / "a.txt").write_text("a")
    (root / "data" / "tmp" / "b.txt").write_text("b")
    (root / "etc").mkdir()
    (root / "etc" / "hosts").write_text("127.0.0.1 localhost\n")
    monkeypatch.chdir(root)
    return root


@pytest.fixture
def write_config(tmp_path):
    """Return a function writing a dedented configuration file and returning its path."""

    def _write(text, name="backup.conf"):
        path = tmp_path / name
        path.write_text(textwrap.dedent(text).lstrip("\n"))
        return path

    return _write


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo logging changes made by the CLI so caplog sees package records."""
    yield
    logger = logging.getLogger("backuplist")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
