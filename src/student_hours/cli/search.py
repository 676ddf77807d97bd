"""
Search CLI for Student Hours Finder.

Usage:
    python -m student_hours.cli search --root PATH --id CODE [--json] [--summary]

Without ``--root`` the configured ``SHF_DEFAULT_ROOT`` folder is searched.
Invalid input prints one line to stderr and exits with 1; a search that finds
nothing is not an error.
"""

import argparse
import json
import sys
from typing import List, Optional, TextIO

from student_hours.domain.student_records.aggregation import (
    group_by_period,
    summarize_hours,
)
from student_hours.domain.student_records.constants import CATEGORY_A, CATEGORY_B
from student_hours.domain.student_records.models import SearchReport
from student_hours.domain.student_records.service import (
    StudentRecordSearch,
    select_root,
)
from student_hours.io.connectors.exceptions import SearchInputError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="student_hours.cli search",
        description="Search every Excel workbook under a folder for one student code",
    )
    parser.add_argument(
        "--root",
        type=str,
        default=None,
        help="Folder to search recursively (default: SHF_DEFAULT_ROOT)",
    )
    parser.add_argument(
        "--id",
        dest="identifier",
        type=str,
        required=True,
        help="Student code to look for (exact match)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as a JSON list",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Print total hours per month and category",
    )
    return parser


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:.2f}"


def render_report(report: SearchReport, out: TextIO, summary: bool = False) -> None:
    """Print results grouped by month, newest first."""
    if not report.results:
        print(f"No records found for '{report.identifier}'.", file=out)
    else:
        print(
            f"{len(report.results)} record(s) for '{report.identifier}' "
            f"in {report.files_scanned} file(s)",
            file=out,
        )
        for period_key, results in group_by_period(report.results).items():
            print("", file=out)
            print(f"== {period_key} ==", file=out)
            for result in results:
                print(
                    f"  {result.file} / {result.sheet} (row {result.row_index})",
                    file=out,
                )
                for label, values in (
                    (CATEGORY_A, result.cocurriculares),
                    (CATEGORY_B, result.liderazgo),
                ):
                    if not values:
                        continue
                    print(f"    {label}:", file=out)
                    for key, value in values.items():
                        print(f"      {key}: {value}", file=out)

        if summary:
            print("", file=out)
            print("Totals:", file=out)
            for period_key, totals in summarize_hours(report.results).items():
                print(
                    f"  {period_key}  {CATEGORY_A}={_format_number(totals[CATEGORY_A])}"
                    f"  {CATEGORY_B}={_format_number(totals[CATEGORY_B])}",
                    file=out,
                )

    if report.failures:
        print("", file=out)
        print(f"{len(report.failures)} file(s)/sheet(s) could not be read:", file=out)
        for failure in report.failures:
            location = failure.file_path
            if failure.sheet_name:
                location = f"{location} [{failure.sheet_name}]"
            print(f"  {location}: {failure.reason}", file=out)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run a search from the command line.

    Returns:
        Exit code (0 for success, 1 for invalid input)
    """
    args = build_parser().parse_args(argv)

    root = select_root(args.root)
    if root is None:
        print("Error: no folder given (use --root or SHF_DEFAULT_ROOT)", file=sys.stderr)
        return 1

    try:
        report = StudentRecordSearch().run(root, args.identifier)
    except SearchInputError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        payload = [result.to_dict() for result in report.results]
        if args.summary:
            payload = {"results": payload, "summary": summarize_hours(report.results)}
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 0

    render_report(report, sys.stdout, summary=args.summary)
    return 0


if __name__ == "__main__":
    sys.exit(main())
