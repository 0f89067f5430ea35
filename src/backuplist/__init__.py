"""Backup path listing utilities.

This package reads a backup configuration describing roots, backup directories
and exclusions, and lists the existing paths beneath them in a form suitable for
piping into an archiver such as pax or cpio.
"""

from importlib.metadata import PackageNotFoundError, version

# Expose the version for both programmatic use and CLI
try:
    __version__ = version("backuplist")
except PackageNotFoundError:
    __version__ = "unknown"
