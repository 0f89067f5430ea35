"""Permission action enum for handling access errors during directory traversal."""

from enum import Enum


class PermissionAction(str, Enum):
    """Action to take when a directory cannot be read during traversal.

    Values:
        IGNORE: Skip the inaccessible directory's contents, logging only at debug level
        WARN: Skip the inaccessible directory's contents and log a warning (default behavior)
        RAISE: Raise a TraversalError immediately when access fails
    """

    IGNORE = "ignore"
    WARN = "warn"
    RAISE = "raise"
