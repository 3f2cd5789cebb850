"""Command-line entry point for the project checker."""

from __future__ import annotations

import argparse
import logging
import signal
import sys
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List

from . import __version__
from .config import OUTPUT_FORMATS, Config, load_config
from .discovery import PROJECT_TYPE_CHOICES, find_projects
from .engine import run_checks
from .errors import ConfigError, DiscoveryError, DuplicateRuleIDError
from .registry import build_registry
from .report import format_project_text, format_summary_text, to_json, write_report
from .result import OverallReport

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_PATHS = (".",)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="project-checker",
        description="Check sketches and libraries against the rule catalog.",
    )
    parser.add_argument(
        "paths",
        nargs="*",
        help="Project directories to check (defaults to the current directory).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML configuration file (defaults to .project-checker.yaml if present).",
    )
    parser.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default=None,
        help="Console output format (defaults to text).",
    )
    parser.add_argument(
        "--report-file",
        dest="report_file",
        default=None,
        help="Path to write the JSON report to, whatever the console format.",
    )
    parser.add_argument(
        "--blocking-threshold",
        default=None,
        help="Lowest severity whose failures fail the run (error, warning or notice).",
    )
    parser.add_argument(
        "--project-type",
        choices=PROJECT_TYPE_CHOICES,
        default=None,
        help="Only check projects of this type.",
    )
    parser.add_argument(
        "--recursive",
        "-r",
        action="store_true",
        help="Search the given paths for projects in subfolders.",
    )
    parser.add_argument(
        "--workers",
        "-j",
        type=int,
        default=None,
        help="Number of rule evaluations to run in parallel.",
    )
    parser.add_argument(
        "--disable",
        action="append",
        default=[],
        metavar="RULE_ID",
        help="Disable a rule (repeatable).",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Show passing rules and debug logging.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@contextmanager
def cancel_on_interrupt() -> Iterator[threading.Event]:
    """Turn SIGINT into a cancellation request for the running checks."""

    cancel_event = threading.Event()
    if threading.current_thread() is not threading.main_thread():
        yield cancel_event
        return

    def _handler(_signum, _frame):
        logger.warning("Interrupt received, finishing running rules")
        cancel_event.set()

    previous = signal.signal(signal.SIGINT, _handler)
    try:
        yield cancel_event
    finally:
        signal.signal(signal.SIGINT, previous)


def write_output(report: OverallReport, config: Config) -> bool:
    if config.output_format == "text":
        for project in report.projects:
            print(format_project_text(project, verbose=config.verbose))
            print()
        if len(report.projects) > 1:
            print(format_summary_text(report))
    else:
        print(to_json(report))

    if config.report_file:
        try:
            write_report(report, config.report_file)
        except OSError as exc:
            print(f"Error writing report file: {exc}", file=sys.stderr)
            return False
        if config.output_format == "text":
            print(f"\nReport written to {config.report_file}")
    return True


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config).merge_args(args)
        configure_logging(config.verbose)
        registry = build_registry(disabled=config.disabled_rules, overrides=config.severity_overrides)
    except (ConfigError, DuplicateRuleIDError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        projects = find_projects(
            args.paths or list(DEFAULT_PROJECT_PATHS),
            project_type=config.project_type,
            recursive=config.recursive,
        )
    except DiscoveryError as exc:
        print(f"Error while finding projects: {exc}", file=sys.stderr)
        return 1

    with cancel_on_interrupt() as cancel_event:
        report = run_checks(
            projects,
            registry,
            blocking_threshold=config.blocking_threshold,
            workers=config.workers,
            cancel_event=cancel_event,
        )

    if not write_output(report, config):
        return 1
    return report.exit_code()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
