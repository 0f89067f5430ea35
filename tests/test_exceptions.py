"""Unit tests for the exception hierarchy."""

import errno

import pytest

from backuplist.exceptions import (
    BackupListError,
    ConfigError,
    MalformedLineError,
    MissingSectionError,
    TraversalError,
    UsageError,
)


@pytest.mark.parametrize("error_type", [UsageError, ConfigError, MissingSectionError, MalformedLineError])
def test_errors_share_base_class(error_type):
    assert issubclass(error_type, BackupListError)


def test_configuration_errors_are_config_errors():
    assert issubclass(MissingSectionError, ConfigError)
    assert issubclass(MalformedLineError, ConfigError)


def test_missing_section_error():
    error = MissingSectionError("exclusions")
    assert error.section == "exclusions"
    assert str(error) == "Missing required section: [[ exclusions ]]"


def test_malformed_line_error():
    error = MalformedLineError(7, "  stray.txt", "file entry outside directory context")
    assert error.line_number == 7
    assert error.line == "  stray.txt"
    assert "Line 7" in str(error)
    assert "stray.txt" in str(error)


def test_traversal_error_uses_strerror():
    cause = PermissionError(errno.EACCES, "Permission denied")
    error = TraversalError("/srv/private", cause)
    assert error.path == "/srv/private"
    assert error.cause is cause
    assert str(error) == "Error accessing /srv/private: Permission denied"
