"""Path normalization and existence checks for emitted paths.

Every path that backuplist writes passes through this module. Normalization is
done with pure functions that return new strings, so each step can be tested on
its own. The existence check is best effort: a path can disappear right after it
was checked, and nothing here tries to guarantee a consistent snapshot.
"""

import logging
import os
import re
from typing import Optional

logger = logging.getLogger(__name__)

_LINE_TERMINATOR = re.compile(r"(\r\n|\r|\n)\Z")
_REPEATED_SEPARATORS = re.compile(r"/{2,}")


def clean(text: str) -> str:
    """Remove a single trailing line terminator, then leading whitespace.

    Trailing whitespace other than the terminator is kept.

    Args:
        text: The raw text, typically a line read from a configuration file.

    Returns:
        The cleaned text.

    Example:
        >>> clean("   notes.txt\\n")
        'notes.txt'
        >>> clean("\\tname with tail  \\r\\n")
        'name with tail  '
        >>> clean("two\\n\\n")
        'two\\n'
    """
    return _LINE_TERMINATOR.sub("", text, count=1).lstrip()


def squeeze_separators(path: str) -> str:
    """Collapse every run of consecutive ``/`` characters into a single one.

    Example:
        >>> squeeze_separators("//srv///data//a.txt")
        '/srv/data/a.txt'
        >>> squeeze_separators("/a//b/../c")
        '/a/b/../c'
    """
    return _REPEATED_SEPARATORS.sub("/", path)


def normalize_path(path: str) -> str:
    """Clean a candidate path and collapse repeated separators.

    Example:
        >>> normalize_path("  /srv//data/report.csv\\n")
        '/srv/data/report.csv'
    """
    return squeeze_separators(clean(path))


def join_path(*parts: str) -> str:
    """Join path fragments with ``/`` and normalize the result.

    Unlike ``os.path.join``, an absolute fragment does not discard the ones
    before it: ``join_path("/srv", "/data")`` is ``/srv/data``.

    Example:
        >>> join_path("/srv", "data", "report.csv")
        '/srv/data/report.csv'
        >>> join_path("/srv/", "/data/")
        '/srv/data/'
    """
    return normalize_path("/".join(parts))


class PathFilter:
    """Final gate for candidate paths before they are written out.

    A candidate is normalized with :func:`normalize_path` and accepted only if
    it exists on the filesystem at the moment of the check. Symbolic links are
    followed for the existence test, so a dangling link is rejected.

    Attributes:
        checked_count (int): Number of candidates examined.
        missing_count (int): Number of candidates rejected because they do not exist.

    Example:
        >>> path_filter = PathFilter()
        >>> path_filter.check("/")
        '/'
        >>> path_filter.check("/definitely/not/here") is None
        True
        >>> path_filter.missing_count
        1
    """

    def __init__(self) -> None:
        self.checked_count = 0
        self.missing_count = 0

    def check(self, candidate: str) -> Optional[str]:
        """Normalize a candidate path and return it if it exists.

        Args:
            candidate: The raw candidate path.

        Returns:
            The normalized path, or None if nothing exists at that path.
        """
        self.checked_count += 1
        path = normalize_path(candidate)
        if os.path.exists(path):
            return path
        self.missing_count += 1
        logger.debug("Skipping nonexistent path: %s", path)
        return None
