"""Command-line interface for backuplist.

This module provides the command-line interface for backuplist, which prints
the paths selected by a backup configuration so they can be piped into an
archiver. It handles argument parsing, output, logging setup and signal
management for graceful interruption handling.

Signal Handling Notes:
    - SIGPIPE: Handled when the archiver closes its end of the pipe early
    - SIGINT: Handled for clean exit on Ctrl+C
    Both cases stop output at the next line and set the exit code.

Exit Codes:
    0: Successful completion
    1: Configuration or runtime error
    2: Command-line usage error
    126: Unreadable directory with -P fail
    130: Interrupted by SIGINT (Ctrl+C)
    141: Broken pipe (SIGPIPE)

Example:
    # Archive everything selected by backup.conf
    $ backuplist backup.conf | pax -w -d -f archive.pax

    # Display version information
    $ backuplist --version
"""

import logging
import sys
from collections.abc import Mapping

from backuplist.backup_lister import BackupLister
from backuplist.cli.argparser import create_parser, validate_args
from backuplist.cli.log_setup import setup_logging
from backuplist.cli.safe_writer import SafeWriter
from backuplist.cli.signal_handler import setup_signal_handling, signal_handler
from backuplist.configuration.parser import parse_config
from backuplist.exceptions import BackupListError, TraversalError, UsageError
from backuplist.exclusion_rules.git_rules import GitIgnoreExclusionRules
from backuplist.file_system_walker.permission_action import PermissionAction

logger = logging.getLogger(__name__)

EXIT_ERROR = 1
EXIT_USAGE = 2
EXIT_TRAVERSAL = 126


def format_counts(counts: Mapping[str, int]) -> str:
    """Format the counts into a human-readable string.

    Args:
        counts: Mapping containing the listing's counters.

    Returns:
        A formatted string showing all counts with appropriate labels.

    Example:
        >>> print(format_counts({"paths": 3, "missing": 1, "duplicates": 0,
        ...                      "pruned": 2, "ignored": 0, "errors": 0}))
        Paths: 3
        Missing: 1
        Duplicates: 0
        Pruned directories: 2
        Ignored: 0
        Unreadable directories: 0
    """
    return "\n".join(
        [
            f"Paths: {counts['paths']}",
            f"Missing: {counts['missing']}",
            f"Duplicates: {counts['duplicates']}",
            f"Pruned directories: {counts['pruned']}",
            f"Ignored: {counts['ignored']}",
            f"Unreadable directories: {counts['errors']}",
        ]
    )


def main() -> None:
    """Main entry point for the backuplist command-line interface.

    Exit codes:
        0: Successful completion
        1: Configuration or runtime error
        2: Command-line usage error
        126: Unreadable directory with -P fail
        130: Interrupted by SIGINT (Ctrl+C)
        141: Broken pipe (SIGPIPE)
    """
    setup_signal_handling()

    # Populated by -e/-i while the command line is parsed
    ignore_rules = GitIgnoreExclusionRules()

    # argparse exits with status 2 on syntax errors and 0 for --version
    parser = create_parser(ignore_rules)
    args = parser.parse_args()

    setup_logging(args.verbose)

    try:
        validate_args(args)
    except UsageError as e:
        parser.print_usage(sys.stderr)
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(EXIT_USAGE)

    perm_action = {
        "ignore": PermissionAction.IGNORE,
        "warn": PermissionAction.WARN,
        "fail": PermissionAction.RAISE,
    }[args.permission_action]

    try:
        # Parse and validate completely before anything is written
        lister = BackupLister(
            parse_config(args.config),
            ignore_rules=ignore_rules if ignore_rules else None,
            permission_action=perm_action,
            follow_symlinks=args.follow_symlinks,
        )

        output_file = args.output if args.output else sys.stdout.fileno()

        with SafeWriter(output_file) as safe_writer:
            try:
                for line in lister.stream_paths():
                    safe_writer.write(line)

                if args.summary:
                    counts = {
                        "paths": lister.path_count,
                        "missing": lister.missing_count,
                        "duplicates": lister.duplicate_count,
                        "pruned": lister.pruned_count,
                        "ignored": lister.ignored_count,
                        "errors": lister.error_count,
                    }
                    count_output_str = format_counts(counts)

                    if args.summary in ("stdout", "file"):
                        safe_writer.write("\n" + count_output_str + "\n")
                    elif args.summary == "stderr":
                        print(count_output_str, file=sys.stderr)

            except BrokenPipeError:
                pass  # SafeWriter will automatically close in the context manager

    except TraversalError as e:
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(EXIT_TRAVERSAL)
    except (BackupListError, OSError) as e:
        print(f"Error: {str(e)}", file=sys.stderr)
        sys.exit(EXIT_ERROR)

    exit_code = signal_handler.exit_code()
    if exit_code is not None:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
