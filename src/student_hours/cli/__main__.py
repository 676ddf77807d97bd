"""
Unified CLI entry point for Student Hours Finder.

Usage:
    python -m student_hours.cli <command> [options]

Available commands:
    search       - Find a student's hours in a folder of workbooks

Examples:
    # Human-readable listing grouped by month
    python -m student_hours.cli search --root ~/Reportes --id 20231234

    # JSON output for other tools
    python -m student_hours.cli search --root ~/Reportes --id 20231234 --json
"""

import argparse
import sys
from typing import List, Optional


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point with subcommand routing.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = argparse.ArgumentParser(
        prog="student_hours.cli",
        description="Student Hours Finder CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Human-readable listing grouped by month
  python -m student_hours.cli search --root ~/Reportes --id 20231234

  # Totals per month and category
  python -m student_hours.cli search --root ~/Reportes --id 20231234 --summary
        """,
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
        help="Command to execute",
    )

    # Search command (delegate all argument parsing to search.py)
    subparsers.add_parser(
        "search",
        help="Find a student's hours in a folder of workbooks",
        description="Search every Excel workbook under a folder for one student code",
        add_help=False,  # Let the delegated module handle help
    )

    args, remaining_args = parser.parse_known_args(argv)

    if args.command == "search":
        from student_hours.cli.search import main as search_main

        return search_main(remaining_args if remaining_args else [])

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
