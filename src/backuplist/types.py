from enum import Enum
from os import PathLike
from typing import Union

# Complete path type including strings and any path-like object
PathType = Union[str, PathLike[str]]


class SectionName(str, Enum):
    """Enumeration of the section names recognised in a configuration file.

    Section names are matched case-sensitively against the text between double
    brackets, e.g. ``[[ roots ]]``.

    Attributes:
        ROOTS: Top-level directories that backup subpaths are resolved against.
        BACKUPS: Subpaths to list, in full or restricted to explicit files.
        EXCLUSIONS: Directories whose subtrees are never descended into.
    """

    ROOTS = "roots"
    BACKUPS = "backups"
    EXCLUSIONS = "exclusions"
