"""In-memory representation of a parsed backup configuration.

The objects in this module are populated once by the configuration parser and
only read afterwards. A :class:`Configuration` holds up to three
:class:`Section` objects, each section holds named :class:`BackableDir` entries,
and each directory holds the file names listed beneath it.
"""

from typing import Dict, List, Optional, Union

from backuplist.exceptions import MissingSectionError
from backuplist.types import PathType, SectionName


class BackableFile:
    """A file name listed beneath a ``[ directory ]`` line.

    Attributes:
        name (str): The file name exactly as cleaned from the configuration line.
    """

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"BackableFile(name={self.name!r})"


class BackableDir:
    """A ``[ directory ]`` entry and the file names listed beneath it.

    An empty file list is meaningful: it requests a full traversal of the
    directory instead of a check of specific files.

    Attributes:
        path (str): The directory name as declared in the configuration.
        files (List[str]): File names in the order they were declared.

    Example:
        >>> backup_dir = BackableDir("data")
        >>> backup_dir.traverse_in_full
        True
        >>> backup_dir.add(BackableFile("report.csv"))
        >>> backup_dir.files
        ['report.csv']
        >>> backup_dir.traverse_in_full
        False
    """

    def __init__(self, path: str) -> None:
        self.path = path
        self.files: List[str] = []

    def add(self, backable_file: BackableFile) -> None:
        """Append a file name to this directory's file list."""
        self.files.append(backable_file.name)

    @property
    def traverse_in_full(self) -> bool:
        """Whether the directory should be walked instead of checked file by file."""
        return not self.files

    def __repr__(self) -> str:
        return f"BackableDir(path={self.path!r}, files={self.files!r})"


class Section:
    """A ``[[ section ]]`` of the configuration and its directories.

    Directories are kept in declaration order and looked up by name. Adding a
    directory whose name is already present replaces the earlier entry, which
    keeps its original position.

    Attributes:
        name (SectionName): Which section this is.
        directories (Dict[str, BackableDir]): Directories keyed by declared name.
        current_directory (Optional[BackableDir]): The most recently added directory.

    Example:
        >>> section = Section(SectionName.BACKUPS)
        >>> section.add(BackableDir("etc"))
        >>> section.add(BackableDir("home"))
        >>> list(section.directories)
        ['etc', 'home']
        >>> section.current_directory.path
        'home'
    """

    def __init__(self, name: Union[str, SectionName]) -> None:
        self.name = SectionName(name)
        self.directories: Dict[str, BackableDir] = {}
        self.current_directory: Optional[BackableDir] = None

    def add(self, directory: BackableDir) -> None:
        """Register a directory and make it the current directory."""
        self.directories[directory.path] = directory
        self.current_directory = directory

    def __repr__(self) -> str:
        return f"Section(name={self.name.value!r}, directories={list(self.directories)!r})"


class Configuration:
    """The sections parsed from one configuration file.

    Attributes:
        file (Optional[PathType]): The file the configuration was read from, if any.
        sections (Dict[SectionName, Section]): Recognised sections by name.
        current_section (Optional[Section]): The most recently added section.
    """

    def __init__(self, file: Optional[PathType] = None) -> None:
        self.file = file
        self.sections: Dict[SectionName, Section] = {}
        self.current_section: Optional[Section] = None

    def add(self, section: Section) -> None:
        """Register a section and make it the current section.

        A section that appears twice in a file is replaced by the later one.
        """
        self.sections[section.name] = section
        self.current_section = section

    def get_section(self, name: Union[str, SectionName]) -> Optional[Section]:
        """Return the named section, or None if the file did not declare it.

        Names outside the recognised sections are never declared, so they also
        give None.

        Example:
            >>> Configuration().get_section("archives") is None
            True
        """
        try:
            key = SectionName(name)
        except ValueError:
            return None
        return self.sections.get(key)

    def require_section(self, name: Union[str, SectionName]) -> Section:
        """Return the named section.

        Raises:
            MissingSectionError: If the file did not declare the section.
        """
        section = self.get_section(name)
        if section is None:
            raise MissingSectionError(name.value if isinstance(name, SectionName) else name)
        return section

    def __repr__(self) -> str:
        return f"Configuration(file={self.file!r}, sections={[s.value for s in self.sections]!r})"
