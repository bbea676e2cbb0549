"""
Epreuve CLI - command-line interface for running test classes.

Examples:
  epreuve                           # Run tests/ (test_*.py files)
  epreuve tests/unit                # Run one directory
  epreuve pkg.tests.test_math       # Run a module
  epreuve -m Calculator             # Only tests whose name contains Calculator
  epreuve -m "*.test_add*,*Parser*" # Glob matchers, comma-separated
  epreuve --reports-dir build/reports

Test progress goes to stdout; diagnostic logging goes to stderr.
"""

import argparse
import logging
import sys
import traceback
from pathlib import Path
from typing import List, Optional

from epreuve.config import PropertyStore, Settings, load_config
from epreuve.core.filters import split_matchers
from epreuve.core.invoker import Invoker
from epreuve.discovery import DEFAULT_PATTERN, ClassDiscoverer
from epreuve.exceptions import EpreuveError
from epreuve.reporter.emojis import EpreuveEmoji
from epreuve.reporter.output import Output
from epreuve.reporter.system_reporter import SystemReporter

DEFAULT_TARGET = "tests"
CAPTURE_FILE = "epreuve-output.txt"


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="epreuve",
        description="Test selection and execution reporting",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  epreuve                           # Run tests/ (test_*.py files)
  epreuve tests/unit                # Run one directory
  epreuve -m Calculator             # Only tests whose name contains Calculator
  epreuve -m "*.test_add*,*Parser*" # Glob matchers, comma-separated
  epreuve --reports-dir build/reports
        """,
    )
    parser.add_argument(
        "targets",
        nargs="*",
        help=f"Directories, .py files or module names (default: {DEFAULT_TARGET})",
    )
    parser.add_argument(
        "-m",
        "--match",
        dest="matchers",
        default=None,
        help="Comma-separated name matchers (substring or glob)",
    )
    parser.add_argument(
        "--pattern",
        default=DEFAULT_PATTERN,
        help=f"Test file pattern inside directories (default: {DEFAULT_PATTERN})",
    )
    parser.add_argument("--reports-dir", help="Write JSON reports to this directory")
    parser.add_argument("--config", help="Config file (default: ./epreuve.yaml)")
    parser.add_argument(
        "--capture",
        nargs="?",
        const="",
        default=None,
        help="Send test stdout to a file (default file inside the reports dir)",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable colors")
    parser.add_argument(
        "--undecorated",
        action="store_true",
        help="Plain output: only test progress and summary lines",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail when a test module cannot be imported",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Quiet mode (no info/warn lines)"
    )
    return parser


def apply_arguments(settings: Settings, args: argparse.Namespace) -> Settings:
    """
    Overlay command-line flags on loaded settings.

    Args:
        settings: Settings from config file and environment
        args: Parsed arguments

    Returns:
        New Settings with flags applied
    """
    update = {}
    if args.reports_dir:
        update["reports_dir"] = args.reports_dir
    if args.no_color:
        update["color"] = False
    if args.undecorated:
        update["decorated"] = False
    if args.capture is not None:
        update["capture_output"] = True
    if args.quiet:
        update["log_levels"] = ""
    elif args.verbose:
        update["log_levels"] = "warn,info,debug"
    return settings.model_copy(update=update)


def capture_path(settings: Settings, args: argparse.Namespace) -> Optional[Path]:
    """Where captured test stdout goes, or None when not capturing."""
    if not settings.capture_output:
        return None
    if args.capture:
        return Path(args.capture)
    base = Path(settings.reports_dir) if settings.reports_dir else Path.cwd()
    return base / CAPTURE_FILE


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    cli_reporter = SystemReporter(
        name="epreuve_cli",
        level=logging.DEBUG if args.verbose else logging.WARNING,
        verbose=2 if args.verbose else 1,
    )

    try:
        settings = apply_arguments(load_config(args.config), args)

        reporter = SystemReporter(
            name="epreuve",
            log_dir=settings.log_dir,
            level=logging.DEBUG if args.verbose else settings.log_level.upper(),
            verbose=2 if args.verbose else 1,
        )
        output = Output.from_settings(settings)

        discoverer = ClassDiscoverer(reporter=reporter, strict=args.strict)
        candidates = discoverer.discover(args.targets or [DEFAULT_TARGET], args.pattern)

        invoker = Invoker(
            candidates,
            split_matchers(args.matchers),
            args.matchers,
            output=output,
            properties=PropertyStore.from_settings(settings),
            reporter=reporter,
            reprint_threshold=settings.reprint_threshold,
            capture_path=capture_path(settings, args),
        )
        return invoker.run()

    except KeyboardInterrupt:
        cli_reporter.warning(
            f"{EpreuveEmoji.STOPPED} Test run interrupted by user", context="CLI"
        )
        return 2

    except EpreuveError as e:
        cli_reporter.error(f"{EpreuveEmoji.TEST_ERROR} Fatal error: {e}", context="CLI")
        if args.verbose:
            cli_reporter.error(traceback.format_exc(), context="CLI")
        return 2


if __name__ == "__main__":
    sys.exit(main())
