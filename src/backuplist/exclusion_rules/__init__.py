"""Exclusion rules for pruning directories and ignoring entries."""

from .base_rules import BaseExclusionRules
from .directory_rules import DirectoryExclusionRules
from .git_rules import GitIgnoreExclusionRules

__all__ = [
    "BaseExclusionRules",
    "DirectoryExclusionRules",
    "GitIgnoreExclusionRules",
]
