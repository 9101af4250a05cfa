"""Command-line interface for etsuite.

Lists the enabled test cases of a decoded ETS document for a set of flags.

Usage:
    # Enabled test cases, one per line
    etsuite gap_ets.yaml --flags ics.yaml

    # Override single flags and treat unknown flags as false
    etsuite gap_ets.yaml --flags ics.yaml --set TSPC_GAP_2_2=true --default false

    # Full report with exclusion reasons
    etsuite gap_ets.yaml --flags ics.yaml --report
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Dict, List, Optional

from etsuite.analyzer import SuiteReport, analyze_suite
from etsuite.enablement import enabled_testcases
from etsuite.flags import (
    FlagFormatError,
    default_resolver,
    load_flags,
    parse_assignment,
    resolver_from_mapping,
)
from etsuite.serialization import SuiteFormatError, load_suite

logger = logging.getLogger(__name__)


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="etsuite",
        description="List the enabled test cases of an ETS suite",
    )
    parser.add_argument("suite", help="Decoded ETS document (.yaml/.yml or .json)")
    parser.add_argument(
        "--flags",
        action="append",
        default=[],
        metavar="FILE",
        help="Flag file (YAML/JSON); later files override earlier ones",
    )
    parser.add_argument(
        "--set",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        dest="assignments",
        help="Set a single flag, overriding flag files",
    )
    parser.add_argument(
        "--default",
        choices=["true", "false"],
        default=None,
        help="Value for flags that are not configured (default: unknown, which disables)",
    )
    parser.add_argument("--report", action="store_true", help="Print an analysis report")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def print_report(report: SuiteReport) -> None:
    """Pretty-print a SuiteReport."""
    print(f"Profile:            {report.profile_name}")
    print(f"ETS version:        {report.version or '(none)'}")
    print(f"Groups:             {report.total_groups} (max depth {report.max_group_depth})")
    print(f"Test cases:         {report.total_testcases}")
    print(f"Enabled:            {report.enabled_count}")
    print(f"Disabled:           {report.disabled_count}")
    for reason, count in sorted(report.exclusions_by_reason.items(), key=lambda item: item[0].value):
        print(f"  {reason.value:<22}{count}")
    print()
    for decision in report.decisions:
        mark = "+" if decision.enabled else "-"
        line = f"{mark} {decision.name}"
        if not decision.enabled:
            line += f"  [{decision.reason.value}]"
        print(line)
    if report.warnings:
        print()
        print("Warnings:")
        for warning in report.warnings:
            print(f"  {warning}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.debug)

    flags: Dict[str, bool] = {}
    try:
        suite = load_suite(args.suite)
        for path in args.flags:
            flags.update(load_flags(path))
        for assignment in args.assignments:
            flags.update(parse_assignment(assignment))
    except (OSError, SuiteFormatError, FlagFormatError) as err:
        print(f"Error: {err}", file=sys.stderr)
        return 1

    resolver = resolver_from_mapping(flags)
    if args.default is not None:
        resolver = default_resolver(args.default == "true", resolver)

    if args.report:
        print_report(analyze_suite(suite, resolver))
        return 0

    for name in enabled_testcases(suite, resolver):
        print(name)
    return 0


if __name__ == "__main__":
    sys.exit(main())
