"""Line-oriented parser for backup configuration files.

A configuration file looks like this::

    # comment line
    [[ roots ]]
    [ /path/to/root ]
    [[ backups ]]
    [ subdir-under-root ]
    relative-file-name.txt
    [[ exclusions ]]
    [ name-matching-a-directory-under-root ]

Each line is classified independently (see :func:`classify_line`) and then fed
through a small state machine that tracks which section and directory the
following lines belong to. Input that is dropped, such as an unknown section
name or a directory that does not exist, is logged rather than discarded
silently.
"""

import logging
import os
import re
from enum import Enum
from typing import Iterable, Optional, Tuple

from backuplist.configuration.model import BackableDir, BackableFile, Configuration, Section
from backuplist.exceptions import ConfigError, MalformedLineError
from backuplist.path_filter import clean
from backuplist.types import PathType, SectionName

logger = logging.getLogger(__name__)

_COMMENT = re.compile(r"^\s*#+")
_SECTION = re.compile(r"^\s*\[\s*\[\s*(.+?)\s*\]\s*\]\s*$")
_DIRECTORY = re.compile(r"^\s*\[\s*(.+?)\s*\]\s*$")


class LineKind(Enum):
    """Classification of a single configuration line."""

    COMMENT = "comment"
    SECTION = "section"
    DIRECTORY = "directory"
    BLANK = "blank"
    FILE = "file"


class ParserState(Enum):
    """Where the parser is relative to sections and directories.

    Values:
        NO_SECTION: No recognised section has been opened yet.
        IN_SECTION: Inside a recognised section, before any directory.
        IN_DIRECTORY: Inside a recognised section with a current directory.
        IGNORED_SECTION: After an unrecognised ``[[ name ]]`` header.
        SKIPPED_DIRECTORY: After a ``[ name ]`` line naming a missing directory.
    """

    NO_SECTION = "no_section"
    IN_SECTION = "in_section"
    IN_DIRECTORY = "in_directory"
    IGNORED_SECTION = "ignored_section"
    SKIPPED_DIRECTORY = "skipped_directory"


def classify_line(line: str) -> Tuple[LineKind, str]:
    """Classify a configuration line and extract its payload.

    Rules are tried in order and the first match wins: comment, section header,
    directory header, blank line, file entry. Bracketed names are stripped on
    both sides. File entries are passed through :func:`clean`, which strips
    leading whitespace only.

    Args:
        line: One line of the file, with or without its terminator.

    Returns:
        A tuple of the line kind and its payload (the name for headers and file
        entries, an empty string otherwise).

    Example:
        >>> classify_line("## a comment")
        (<LineKind.COMMENT: 'comment'>, '')
        >>> classify_line("[[ roots ]]")
        (<LineKind.SECTION: 'section'>, 'roots')
        >>> classify_line("  [ /srv ]  ")
        (<LineKind.DIRECTORY: 'directory'>, '/srv')
        >>> classify_line("   ")
        (<LineKind.BLANK: 'blank'>, '')
        >>> classify_line("  report.csv\\n")
        (<LineKind.FILE: 'file'>, 'report.csv')
    """
    if _COMMENT.match(line):
        return LineKind.COMMENT, ""
    match = _SECTION.match(line)
    if match:
        return LineKind.SECTION, match.group(1)
    match = _DIRECTORY.match(line)
    if match:
        return LineKind.DIRECTORY, match.group(1)
    if not line.strip():
        return LineKind.BLANK, ""
    return LineKind.FILE, clean(line)


class ConfigParser:
    """Builds a :class:`Configuration` from a configuration file.

    Directory lines are only accepted if they name an existing directory at
    parse time. The check uses the name exactly as written, so relative names
    are resolved against the current working directory, whatever section they
    appear in.

    Attributes:
        path (PathType): The configuration file to read.
        state (ParserState): Current state of the parser.
        configuration (Configuration): The configuration being built.

    Example:
        >>> parser = ConfigParser("backup.conf")
        >>> configuration = parser.parse_lines(["[[ roots ]]", "[ / ]"])
        >>> list(configuration.require_section("roots").directories)
        ['/']
        >>> parser.state
        <ParserState.IN_DIRECTORY: 'in_directory'>
    """

    def __init__(self, path: PathType) -> None:
        self.path = path
        self.state = ParserState.NO_SECTION
        self.configuration = Configuration(path)
        self._section: Optional[Section] = None
        self._directory: Optional[BackableDir] = None

    def parse(self) -> Configuration:
        """Read and parse the configuration file.

        Returns:
            The populated configuration.

        Raises:
            ConfigError: If the file cannot be opened or read.
            MalformedLineError: If a line appears outside a valid context.
        """
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return self.parse_lines(f)
        except UnicodeDecodeError as e:
            raise ConfigError(f"Cannot decode configuration file {self.path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Cannot open configuration file {self.path}: {e.strerror or e}") from e

    def parse_lines(self, lines: Iterable[str]) -> Configuration:
        """Parse configuration lines from any iterable of strings.

        Raises:
            MalformedLineError: If a line appears outside a valid context.
        """
        for line_number, line in enumerate(lines, start=1):
            kind, payload = classify_line(line)
            if kind is LineKind.SECTION:
                self._on_section(payload)
            elif kind is LineKind.DIRECTORY:
                self._on_directory(line_number, line, payload)
            elif kind is LineKind.FILE:
                self._on_file(line_number, line, payload)
        return self.configuration

    def _on_section(self, name: str) -> None:
        self._directory = None
        try:
            section_name = SectionName(name)
        except ValueError:
            logger.info("Ignoring unknown section [[ %s ]] and its entries", name)
            self._section = None
            self.state = ParserState.IGNORED_SECTION
            return
        self._section = Section(section_name)
        self.configuration.add(self._section)
        self.state = ParserState.IN_SECTION

    def _on_directory(self, line_number: int, line: str, name: str) -> None:
        section = self._section
        if section is None:
            if self.state is ParserState.IGNORED_SECTION:
                logger.info("Line %d: ignoring directory %s in unknown section", line_number, name)
                return
            raise MalformedLineError(line_number, line.rstrip("\r\n"), "directory entry outside any section")
        if not os.path.isdir(name):
            logger.info("Line %d: ignoring %s, not an existing directory", line_number, name)
            self._directory = None
            self.state = ParserState.SKIPPED_DIRECTORY
            return
        self._directory = BackableDir(name)
        section.add(self._directory)
        self.state = ParserState.IN_DIRECTORY

    def _on_file(self, line_number: int, line: str, name: str) -> None:
        directory = self._directory
        if directory is None:
            if self.state is ParserState.IGNORED_SECTION:
                logger.info("Line %d: ignoring file %s in unknown section", line_number, name)
                return
            if self.state is ParserState.SKIPPED_DIRECTORY:
                logger.info("Line %d: ignoring file %s under a skipped directory", line_number, name)
                return
            raise MalformedLineError(line_number, line.rstrip("\r\n"), "file entry outside directory context")
        directory.add(BackableFile(name))


def parse_config(path: PathType) -> Configuration:
    """Parse the configuration file at ``path``.

    Raises:
        ConfigError: If the file cannot be read or contains a malformed line.
    """
    return ConfigParser(path).parse()
