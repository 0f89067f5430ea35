"""Exclusion rules matching directories by exact name."""

import os
from typing import Iterable, Mapping, Optional, Set, Union

from backuplist.path_filter import squeeze_separators

from .base_rules import BaseExclusionRules


def _directory_key(path: str) -> str:
    """Normalize a directory name for comparison.

    Repeated separators are collapsed and a trailing ``/`` is dropped, except for
    the filesystem root itself.
    """
    key = squeeze_separators(path)
    if len(key) > 1 and key.endswith("/"):
        key = key[:-1]
    return key


class DirectoryExclusionRules(BaseExclusionRules):
    """Exclusion rules built from a set of declared directory names.

    A path is excluded if it is equal to one of the declared names. There is no
    prefix, glob or pattern matching: ``data/tmp`` excludes ``data/tmp`` and
    nothing else. Subtrees are excluded only because the walker does not
    descend into an excluded directory.

    Names are normalized before comparison, so ``/srv//data/`` and ``/srv/data``
    are the same name. Absolute names also match the location they resolve to
    once symbolic links are followed.

    Attributes:
        names (Set[str]): The normalized directory names.
        real_names (Set[str]): Resolved forms of the absolute names.

    Example:
        >>> rules = DirectoryExclusionRules(["/srv/data/tmp/", "cache"])
        >>> rules.exclude("/srv/data/tmp")
        True
        >>> rules.exclude("cache")
        True
        >>> rules.exclude("/srv/data")
        False
        >>> rules.add_rule("logs")
        >>> "logs" in rules
        True
    """

    def __init__(self, names: Optional[Union[Iterable[str], Mapping[str, object]]] = None):
        """Initialize the rules from directory names.

        Args:
            names: Directory names to exclude. A mapping, such as a section's
                directories, contributes its keys.
        """
        self.names: Set[str] = set()
        self.real_names: Set[str] = set()
        if names is not None:
            for name in names:
                self.add_rule(name)

    def exclude(self, path: str) -> bool:
        """Check whether ``path`` is exactly one of the declared directory names."""
        key = _directory_key(path)
        return key in self.names or key in self.real_names

    def add_rule(self, rule: str) -> None:
        """Add a directory name to the exclusion set."""
        key = _directory_key(rule)
        self.names.add(key)
        if os.path.isabs(key):
            self.real_names.add(os.path.realpath(key))

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self.exclude(path)

    def __len__(self) -> int:
        return len(self.names)
