"""Command-line argument parsing for backuplist.

This module defines the command-line interface for backuplist,
handling argument parsing and validation.
"""

import argparse
import os
from pathlib import Path
from typing import Any, List, Optional, Sequence, Type, Union

from backuplist import __version__
from backuplist.exceptions import UsageError
from backuplist.exclusion_rules.base_rules import BaseExclusionRules


def create_exclusion_action(exclusion_rules: BaseExclusionRules) -> Type[argparse.Action]:
    """Create a custom action class for handling ignore rules.

    This factory function creates an action class that will update the provided
    rules object as arguments are processed. This preserves the exact order of
    ignore files and patterns as they appear on the command line.

    Args:
        exclusion_rules: The rules object to update during parsing.

    Returns:
        A custom action class for use with argparse.
    """

    class ExclusionRulesAction(argparse.Action):
        """Action to update ignore rules as arguments are processed."""

        def __init__(self, option_strings: List[str], dest: str, **kwargs: Any) -> None:
            super().__init__(option_strings, dest, **kwargs)

        def __call__(
            self,
            parser: argparse.ArgumentParser,
            namespace: argparse.Namespace,
            values: Union[str, Sequence[Any], None],
            option_string: Optional[str] = None,
        ) -> None:
            if values is None:
                return

            if option_string in ("-e", "--exclude"):
                if isinstance(values, (str, os.PathLike)):
                    path = values
                else:
                    path = Path(str(values))
                try:
                    exclusion_rules.load_rules(path)
                except FileNotFoundError as e:
                    parser.error(str(e))
            else:  # -i/--ignore
                exclusion_rules.add_rule(str(values))

            # Keep the raw values on the namespace as well
            if getattr(namespace, self.dest, None) is None:
                setattr(namespace, self.dest, [])
            getattr(namespace, self.dest).append(values)

    return ExclusionRulesAction


def create_parser(exclusion_rules: BaseExclusionRules) -> argparse.ArgumentParser:
    """Create and configure the command-line argument parser.

    Args:
        exclusion_rules: The ignore rules object to update during parsing.

    Returns:
        An ArgumentParser instance configured with backuplist's options.
    """
    description = """
    backuplist: list the files selected by a backup configuration.

    Reads a configuration file describing backup roots, backup directories and
    exclusions, and prints the absolute path of every existing file and directory
    it selects, one per line. The output is meant to be piped into an archiver.

    Configuration format:
      # comment line
      [[ roots ]]
      [ /path/to/root ]
      [[ backups ]]
      [ subdir-under-root ]
      optional-file-name.txt
      [[ exclusions ]]
      [ directory-not-to-descend-into ]

    A backup directory without listed files is walked in full beneath every root.
    A backup directory with listed files contributes only those files. Roots and
    exclusions are never descended into during a walk.
    """

    epilog = """
    Examples:
      # Create a pax archive of everything selected
      backuplist backup.conf | pax -w -d -f archive.pax

      # Write the list to a file and report counts on stderr
      backuplist -o files.txt -s stderr backup.conf

      # Leave out editor backups and caches
      backuplist -i "*~" -i "__pycache__/" backup.conf

      # Read additional gitignore-style patterns from a file
      backuplist -e backup.ignore backup.conf

      # Stop on the first unreadable directory
      backuplist -P fail backup.conf

      # Show which configuration lines were ignored
      backuplist -v backup.conf > /dev/null
    """

    parser = argparse.ArgumentParser(
        prog="backuplist",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-V", "--version", action="version", version=f"backuplist {__version__}", help="Show the version and exit"
    )

    ExclusionAction = create_exclusion_action(exclusion_rules)

    parser.add_argument(
        "config",
        type=Path,
        metavar="CONFIG",
        help="The backup configuration file to read.",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        metavar="FILE",
        help="Output file path. If not specified, paths are written to stdout.",
    )
    parser.add_argument(
        "-e",
        "--exclude",
        type=Path,
        metavar="FILE",
        action=ExclusionAction,
        help="File of gitignore-style patterns for entries to leave out (can be specified multiple times).",
    )
    parser.add_argument(
        "-i",
        "--ignore",
        type=str,
        metavar="PATTERN",
        action=ExclusionAction,
        help=(
            "Individual gitignore-style pattern for entries to leave out, matched against paths relative "
            "to each root. Can be specified multiple times, and patterns are processed in the order they "
            "appear, mixed with -e/--exclude options."
        ),
    )
    parser.add_argument(
        "-L",
        "--follow-symlinks",
        action="store_true",
        help="Descend into symbolically linked directories. By default links are listed but not followed.",
    )
    parser.add_argument(
        "-P",
        "--permission-action",
        choices=["ignore", "warn", "fail"],
        default="warn",
        help="How to handle directories that cannot be read (default: warn).",
    )
    parser.add_argument(
        "-s",
        "--summary",
        metavar="DEST",
        choices=["stderr", "stdout", "file"],
        help="Print summary report. Valid destinations: stderr, stdout, file (requires -o)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log ignored configuration input and skipped paths to stderr (-vv for debug output).",
    )

    return parser


def validate_args(args: argparse.Namespace) -> None:
    """Validate command-line arguments.

    Performs additional validation beyond what argparse can handle.

    Args:
        args: Parsed command-line arguments.

    Raises:
        UsageError: If any arguments fail validation.
    """
    if not args.config.is_file():
        raise UsageError(f"Configuration file not found: {args.config}")

    if args.summary == "file" and not args.output:
        raise UsageError("--summary=file requires -o/--output to be specified")
