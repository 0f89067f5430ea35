"""Backup path listing with streaming support.

This module ties the parsed configuration to the filesystem walker. It crosses
every root with every backup directory and streams the resulting paths, one
line at a time, so that arbitrarily large trees can be listed with constant
memory apart from the set used for deduplication.
"""

import logging
from typing import Iterator, Optional, Set, Union

from backuplist.configuration.model import BackableDir, Configuration
from backuplist.configuration.parser import parse_config
from backuplist.exclusion_rules.base_rules import BaseExclusionRules
from backuplist.exclusion_rules.directory_rules import DirectoryExclusionRules
from backuplist.file_system_walker.permission_action import PermissionAction
from backuplist.file_system_walker.tree_walker import TreeWalker
from backuplist.path_filter import PathFilter, join_path
from backuplist.types import PathType, SectionName

logger = logging.getLogger(__name__)


def effective_exclusions(configuration: Configuration) -> DirectoryExclusionRules:
    """Build the directory names that must not be descended into.

    The result is the union of the ``exclusions`` and ``roots`` sections. Adding
    the roots means no root is ever walked into from beneath another root.

    Raises:
        MissingSectionError: If either section is absent.
    """
    exclusions = dict(configuration.require_section(SectionName.EXCLUSIONS).directories)
    exclusions.update(configuration.require_section(SectionName.ROOTS).directories)
    return DirectoryExclusionRules(exclusions)


class BackupLister:
    """Streaming lister of the paths selected by a backup configuration.

    For every root, in declaration order, and every backup directory, in
    declaration order:

    - a backup directory without listed files is walked in full, starting at the
      root joined with the directory's name in the ``backups`` section;
    - a backup directory with listed files contributes only those files, each
      built from the root, the directory's declared path and the file name.

    Only paths that exist are emitted, and each path is emitted at most once.

    Streaming properties:
    - stream_paths() can only be performed once per instance
    - Counters are updated incrementally as paths are produced

    Attributes:
        configuration (Configuration): The parsed configuration.
        exclusions (DirectoryExclusionRules): Effective pruning set (exclusions and roots).
        path_count (int): Number of paths emitted so far.
        duplicate_count (int): Number of paths suppressed because they were already emitted.
        streaming_complete (bool): Whether stream_paths() has been fully consumed.

    Example:
        >>> from backuplist.configuration.parser import ConfigParser
        >>> configuration = ConfigParser("backup.conf").parse_lines(["[[ roots ]]", "[ / ]"])
        >>> BackupLister(configuration)
        Traceback (most recent call last):
            ...
        backuplist.exceptions.MissingSectionError: Missing required section: [[ backups ]]

    Raises:
        MissingSectionError: If the roots, backups or exclusions section is absent.
        TraversalError: While streaming, if a directory cannot be listed and
            permission_action is RAISE.
    """

    def __init__(
        self,
        configuration: Configuration,
        *,
        ignore_rules: Optional[BaseExclusionRules] = None,
        permission_action: Union[str, PermissionAction] = PermissionAction.WARN,
        follow_symlinks: bool = False,
    ):
        """Initialize the lister and validate the configuration.

        Args:
            configuration: The parsed configuration.
            ignore_rules: Optional rules dropping entries from full traversals and
                explicit file lists. Matched against paths relative to the root.
            permission_action: How to handle unreadable directories. Can be either
                "ignore", "warn" or "raise", or a PermissionAction enum value.
            follow_symlinks: Whether to descend into symlinked directories.

        Raises:
            MissingSectionError: If a required section is absent.
            ValueError: If permission_action is not a valid action.
        """
        if isinstance(permission_action, str):
            try:
                permission_action = PermissionAction(permission_action.lower())
            except ValueError:
                raise ValueError(
                    f"Invalid permission_action: {permission_action}. " "Must be one of: 'ignore', 'warn', 'raise'"
                )

        self.configuration = configuration
        self._roots = configuration.require_section(SectionName.ROOTS).directories
        self._backups = configuration.require_section(SectionName.BACKUPS).directories
        self.exclusions = effective_exclusions(configuration)
        self._ignore_rules = ignore_rules

        self._path_filter = PathFilter()
        self._walker = TreeWalker(
            self.exclusions,
            ignore_rules=ignore_rules,
            permission_action=permission_action,
            follow_symlinks=follow_symlinks,
            path_filter=self._path_filter,
        )

        self._seen: Set[str] = set()
        self.path_count = 0
        self.duplicate_count = 0
        self._explicit_ignored_count = 0
        self._streaming_started = False
        self.streaming_complete = False

    @classmethod
    def from_file(cls, path: PathType, **kwargs: object) -> "BackupLister":
        """Parse the configuration file at ``path`` and build a lister for it.

        Raises:
            ConfigError: If the file cannot be read, contains a malformed line or
                lacks a required section.
        """
        return cls(parse_config(path), **kwargs)  # type: ignore[arg-type]

    def stream_paths(self) -> Iterator[str]:
        """Stream the selected paths, one newline-terminated line at a time.

        Yields:
            Each emitted path followed by ``"\\n"``.

        Raises:
            RuntimeError: If called more than once.
            TraversalError: If a directory cannot be listed and permission_action is RAISE.
        """
        if self._streaming_started:
            raise RuntimeError("Paths have already been streamed")
        self._streaming_started = True

        for path in self.iterate_paths():
            if path in self._seen:
                self.duplicate_count += 1
                continue
            self._seen.add(path)
            self.path_count += 1
            yield path + "\n"

        self.streaming_complete = True

    def iterate_paths(self) -> Iterator[str]:
        """Yield existing paths for every root and backup directory, duplicates included."""
        for root_name, root in self._roots.items():
            for backup_name, backup_dir in self._backups.items():
                if backup_dir.traverse_in_full:
                    logger.debug("Walking %s under root %s", backup_name, root_name)
                    yield from self.walk_backup(root.path, backup_name)
                else:
                    yield from self.explicit_files(root.path, backup_dir)

    def walk_backup(self, root: str, backup_name: str) -> Iterator[str]:
        """Walk the backup directory keyed ``backup_name`` beneath ``root``."""
        return self._walker.walk(root, backup_name)

    def explicit_files(self, root: str, backup_dir: BackableDir) -> Iterator[str]:
        """Yield the files listed beneath ``backup_dir`` that exist under ``root``.

        Paths are built from the directory's declared path, in declaration order.
        """
        for file_name in backup_dir.files:
            candidate = join_path(root, backup_dir.path, file_name)
            if self._ignore_rules and self._ignore_rules.exclude(join_path(backup_dir.path, file_name).lstrip("/")):
                self._explicit_ignored_count += 1
                logger.debug("Ignoring %s", candidate)
                continue
            path = self._path_filter.check(candidate)
            if path is not None:
                yield path

    @property
    def missing_count(self) -> int:
        """Number of candidate paths dropped because they did not exist."""
        return self._path_filter.missing_count

    @property
    def pruned_count(self) -> int:
        """Number of excluded directories that were not descended into."""
        return self._walker.pruned_count

    @property
    def ignored_count(self) -> int:
        """Number of entries dropped by ignore rules."""
        return self._walker.ignored_count + self._explicit_ignored_count

    @property
    def error_count(self) -> int:
        """Number of directories that could not be listed."""
        return self._walker.error_count
