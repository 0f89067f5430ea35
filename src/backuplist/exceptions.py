class BackupListError(Exception):
    """
    Base class for all errors raised by backuplist.

    The command-line interface catches this type to report a failure as a single
    ``Error: ...`` line on stderr instead of a traceback.
    """

    pass


class UsageError(BackupListError):
    """
    Exception raised when the command line is syntactically valid but unusable.

    This covers checks argparse cannot express, such as a configuration file
    argument that does not name an existing file.

    Example:
        >>> error = UsageError("Configuration file not found: backup.conf")
        >>> str(error)
        'Configuration file not found: backup.conf'
    """

    pass


class ConfigError(BackupListError):
    """
    Exception raised when a configuration file cannot be read or is unusable.

    Example:
        >>> error = ConfigError("Cannot open configuration file: backup.conf")
        >>> isinstance(error, BackupListError)
        True
    """

    pass


class MissingSectionError(ConfigError):
    """
    Exception raised when a required section is absent from the configuration.

    Attributes:
        section (str): Name of the missing section.

    Example:
        >>> error = MissingSectionError("backups")
        >>> str(error)
        'Missing required section: [[ backups ]]'
        >>> error.section
        'backups'
    """

    def __init__(self, section: str) -> None:
        """
        Initialize the exception with the name of the missing section.

        Args:
            section (str): Name of the section that was not found.
        """
        self.section = section
        super().__init__(f"Missing required section: [[ {section} ]]")


class MalformedLineError(ConfigError):
    """
    Exception raised when a configuration line appears outside a valid context.

    The typical case is a file entry before any ``[ directory ]`` line of a
    recognised section, which has no directory it could belong to.

    Attributes:
        line_number (int): One-based number of the offending line.
        line (str): Content of the offending line, without its terminator.
        reason (str): Short description of what is wrong with the line.

    Example:
        >>> error = MalformedLineError(3, "notes.txt", "file entry outside directory context")
        >>> str(error)
        "Line 3: file entry outside directory context: 'notes.txt'"
    """

    def __init__(self, line_number: int, line: str, reason: str) -> None:
        """
        Initialize the exception with the location and content of the bad line.

        Args:
            line_number (int): One-based number of the offending line.
            line (str): Content of the offending line.
            reason (str): Short description of the problem.
        """
        self.line_number = line_number
        self.line = line
        self.reason = reason
        super().__init__(f"Line {line_number}: {reason}: {line!r}")


class TraversalError(BackupListError):
    """
    Exception raised when a directory cannot be read during traversal.

    This is only raised when the traversal is configured to fail on access
    errors. Otherwise the entry is logged and skipped.

    Attributes:
        path (str): Path of the directory that could not be read.
        cause (OSError): The underlying operating system error.
    """

    def __init__(self, path: str, cause: OSError) -> None:
        """
        Initialize the exception with the failing path and its cause.

        Args:
            path (str): Path of the directory that could not be read.
            cause (OSError): The underlying operating system error.
        """
        self.path = path
        self.cause = cause
        super().__init__(f"Error accessing {path}: {cause.strerror or cause}")
