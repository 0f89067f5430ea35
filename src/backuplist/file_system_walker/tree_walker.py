"""Depth-first directory traversal with exclusion pruning.

This module provides the TreeWalker class, which lists every existing entry
beneath a backup directory while refusing to descend into excluded directories.
"""

import logging
import os
from typing import Iterator, Optional, Set

from backuplist.exceptions import TraversalError
from backuplist.exclusion_rules.base_rules import BaseExclusionRules
from backuplist.file_system_walker.file_identifier import FileIdentifier
from backuplist.file_system_walker.permission_action import PermissionAction
from backuplist.path_filter import PathFilter, join_path, normalize_path

logger = logging.getLogger(__name__)


def relative_to_root(root: str, path: str) -> str:
    """Strip the root prefix from a path.

    The result has no leading separator. The root itself maps to an empty string,
    and a path outside the root is returned unchanged.

    Example:
        >>> relative_to_root("/srv", "/srv/data/tmp")
        'data/tmp'
        >>> relative_to_root("/srv/", "/srv/data")
        'data'
        >>> relative_to_root("/srv", "/srv")
        ''
        >>> relative_to_root("/srv", "/srvdata")
        '/srvdata'
    """
    prefix = root if root.endswith("/") else root + "/"
    if path == root or path + "/" == prefix:
        return ""
    if path.startswith(prefix):
        return path[len(prefix) :]
    return path


class TreeWalker:
    """Recursive, pre-order walker over the entries beneath a root and subpath.

    The walk starts at ``root + "/" + subpath`` and visits entries depth-first,
    each directory before its children, with children in sorted order. For every
    directory the walker computes its path relative to the root. If either that
    relative path or the full path is one of the names in ``prune_rules``, the
    directory is skipped: it is not emitted and nothing beneath it is visited.
    When symbolic links are followed, the resolved location of each directory is
    checked as well, so a link cannot lead into a root or an excluded directory.

    Optional ``ignore_rules`` are matched against the relative path (with a
    trailing ``/`` for directories). A matching entry is dropped, and so is the
    subtree beneath a matching directory.

    Every remaining entry goes through a PathFilter, so only normalized paths that
    exist at the moment they are checked are yielded.

    Symbolic Link Behavior:
        By default symbolic links are yielded as entries but never descended into.
        With follow_symlinks=True, symlinked directories are descended into and a
        device/inode check prevents infinite recursion through symlink loops.

    Permission Handling:
        A directory that cannot be listed is handled according to permission_action:
        - IGNORE: skip its contents, logging at debug level
        - WARN (default): skip its contents and log a warning
        - RAISE: raise TraversalError

    Attributes:
        prune_rules (BaseExclusionRules): Directories that must not be descended into.
        ignore_rules (Optional[BaseExclusionRules]): Entries to drop from the listing.
        permission_action (PermissionAction): How to handle unreadable directories.
        follow_symlinks (bool): Whether to descend into symlinked directories.
        path_filter (PathFilter): Final normalization and existence check.
        pruned_count (int): Number of directories skipped by prune_rules.
        ignored_count (int): Number of entries dropped by ignore_rules.
        error_count (int): Number of directories that could not be listed.

    Example:
        >>> from backuplist.exclusion_rules.directory_rules import DirectoryExclusionRules
        >>> walker = TreeWalker(DirectoryExclusionRules())
        >>> list(walker.walk("/definitely", "not/here"))
        []
    """

    def __init__(
        self,
        prune_rules: BaseExclusionRules,
        ignore_rules: Optional[BaseExclusionRules] = None,
        permission_action: PermissionAction = PermissionAction.WARN,
        follow_symlinks: bool = False,
        path_filter: Optional[PathFilter] = None,
    ) -> None:
        self.prune_rules = prune_rules
        self.ignore_rules = ignore_rules
        self.permission_action = permission_action
        self.follow_symlinks = follow_symlinks
        self.path_filter = path_filter if path_filter is not None else PathFilter()
        self.pruned_count = 0
        self.ignored_count = 0
        self.error_count = 0

    def walk(self, root: str, subpath: str) -> Iterator[str]:
        """Yield every existing, non-excluded path beneath ``root`` and ``subpath``.

        Args:
            root: The root directory the subpath is resolved against.
            subpath: The directory beneath the root to start from.

        Yields:
            Normalized paths, each directory before its contents.

        Raises:
            TraversalError: If a directory cannot be listed and permission_action is RAISE.
        """
        root = normalize_path(root)
        start = join_path(root, subpath)
        if not os.path.lexists(start):
            logger.info("Skipping %s, it does not exist", start)
            return

        visited: Set[FileIdentifier] = set()
        real_root = os.path.realpath(root) if self.follow_symlinks else root
        yield from self._visit(root, real_root, start, visited)

    def _is_directory(self, path: str) -> bool:
        if os.path.islink(path) and not self.follow_symlinks:
            return False
        return os.path.isdir(path)

    def _visit(self, root: str, real_root: str, path: str, visited: Set[FileIdentifier]) -> Iterator[str]:
        is_dir = self._is_directory(path)
        relative = relative_to_root(root, path)

        if self.ignore_rules and relative:
            if self.ignore_rules.exclude(relative + "/" if is_dir else relative):
                self.ignored_count += 1
                logger.debug("Ignoring %s", path)
                return

        if is_dir and self._is_pruned(relative, path, real_root):
            self.pruned_count += 1
            logger.debug("Pruning excluded directory %s", path)
            return

        checked = self.path_filter.check(path)
        if checked is not None:
            yield checked

        if not is_dir:
            return

        file_id = FileIdentifier.for_path(path) if self.follow_symlinks else None
        if file_id is not None:
            if file_id in visited:
                logger.warning("Skipping %s, symlink loop detected", path)
                return
            visited.add(file_id)

        try:
            try:
                children = sorted(os.listdir(path))
            except OSError as e:
                self._handle_error(path, e)
                return

            for child in children:
                yield from self._visit(root, real_root, join_path(path, child), visited)
        finally:
            # Only the current branch counts as a loop; siblings may reach the same directory.
            if file_id is not None:
                visited.discard(file_id)

    def _is_pruned(self, relative: str, path: str, real_root: str) -> bool:
        if self.prune_rules.exclude(relative) or self.prune_rules.exclude(path):
            return True
        if not self.follow_symlinks:
            return False
        # A followed link can lead into a root or excluded directory under another name
        real_path = os.path.realpath(path)
        return self.prune_rules.exclude(real_path) or self.prune_rules.exclude(relative_to_root(real_root, real_path))

    def _handle_error(self, path: str, error: OSError) -> None:
        self.error_count += 1
        if self.permission_action == PermissionAction.RAISE:
            raise TraversalError(path, error) from error
        if self.permission_action == PermissionAction.WARN:
            logger.warning("Skipping contents of %s: %s", path, error.strerror or error)
        else:
            logger.debug("Skipping contents of %s: %s", path, error.strerror or error)
