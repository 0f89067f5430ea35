from abc import ABC, abstractmethod
from typing import Sequence, Union

from backuplist.types import PathType


class BaseExclusionRules(ABC):
    """
    Abstract base class defining the interface for directory and file exclusion rules.

    Two kinds of rules are used during a traversal. Pruning rules decide which
    directories are not descended into (see ``DirectoryExclusionRules``), and
    ignore rules decide which entries are dropped from the listing altogether
    (see ``GitIgnoreExclusionRules``). Both answer the same question for a path,
    so the walker treats them through this single interface.

    File loading and individual rule addition are optional capabilities that
    depend on the rule type.

    Example:
        >>> from backuplist.exclusion_rules.directory_rules import DirectoryExclusionRules
        >>> rules = DirectoryExclusionRules(["data/tmp"])
        >>> rules.exclude("data/tmp")
        True
        >>> rules.exclude("data/tmp/cache")
        False
        >>> rules.load_rules("excludes.txt")
        Traceback (most recent call last):
            ...
        NotImplementedError: DirectoryExclusionRules doesn't support loading rules from files.
    """

    @abstractmethod
    def exclude(self, path: str) -> bool:
        """
        Determine if a given path should be excluded based on the loaded rules.

        Args:
            path (str): The file or directory path to check. This is typically a
                path relative to the root of the traversal.

        Returns:
            bool: True if the path should be excluded, False if it should be included.
        """
        pass

    def load_rules(self, rules_files: Union[PathType, Sequence[PathType]]) -> None:
        """
        Load and parse exclusion rules from one or more files.

        Args:
            rules_files: Path to a file or sequence of paths containing exclusion rules.

        Raises:
            NotImplementedError: If this rule type doesn't support loading from files.
            FileNotFoundError: If any rules file does not exist (for file-supporting rule types).
        """
        raise NotImplementedError(f"{self.__class__.__name__} doesn't support loading rules from files.")

    def add_rule(self, rule: str) -> None:
        """
        Add a single exclusion rule directly.

        Args:
            rule (str): The exclusion rule to add. The format depends on the specific
                implementation (e.g., a gitignore pattern like "*.pyc").

        Raises:
            NotImplementedError: If this rule type doesn't support adding individual rules.
        """
        raise NotImplementedError(f"{self.__class__.__name__} doesn't support adding individual rules.")
