"""memmon - command-line entry point."""

import argparse
import logging
import sys
from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError, version

from rich.console import Console

from memmon.aggregate import aggregate
from memmon.monitor import MemoryCollector
from memmon.render import print_lines, render_app_memory, render_system_memory

logger = logging.getLogger(__name__)

DEFAULT_TOP = 15


@dataclass(slots=True, frozen=True)
class Options:
    """Run-time options parsed from the command line."""

    apps: bool = False
    top: int = DEFAULT_TOP
    color: bool = True
    verbose: bool = False


def parse_top_count(value: str) -> int:
    """Parse the --top value, falling back to the default when it is not a positive integer."""
    try:
        count = int(value)
    except (TypeError, ValueError):
        logger.debug("Invalid top count %r, using %d", value, DEFAULT_TOP)
        return DEFAULT_TOP

    if count <= 0:
        logger.debug("Non-positive top count %d, using %d", count, DEFAULT_TOP)
        return DEFAULT_TOP
    return count


def _package_version() -> str:
    try:
        return version("memmon")
    except PackageNotFoundError:
        return "unknown"


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="memmon",
        description="Show system memory usage with a visual display.",
    )
    parser.add_argument(
        "-a",
        "--apps",
        action="store_true",
        help="show memory usage by application",
    )
    # Kept as a string so that invalid values fall back instead of erroring
    parser.add_argument(
        "-t",
        "--top",
        metavar="NUMBER",
        default=str(DEFAULT_TOP),
        help=f"number of top applications to show (default: {DEFAULT_TOP})",
    )
    parser.add_argument(
        "--no-color",
        action="store_false",
        dest="color",
        help="disable colored output",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="log debug information to stderr",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {_package_version()}",
    )
    return parser


def parse_options(argv: list[str] | None = None) -> Options:
    """Parse command-line arguments into Options."""
    args = build_parser().parse_args(argv)
    return Options(
        apps=args.apps,
        top=parse_top_count(args.top),
        color=args.color,
        verbose=args.verbose,
    )


def run(options: Options, collector: MemoryCollector, console: Console) -> None:
    """Collect one snapshot and print the report."""
    snapshot = collector.get_system_snapshot()
    print_lines(console, render_system_memory(snapshot))

    if options.apps:
        usages = aggregate(collector.list_processes())
        print_lines(console, render_app_memory(usages, snapshot.total, options.top))


def main(argv: list[str] | None = None) -> int:
    """Entry point for the memmon command."""
    options = parse_options(argv)

    logging.basicConfig(
        level=logging.DEBUG if options.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
        stream=sys.stderr,
    )
    logger.debug("Options: %s", options)

    # None lets rich fall back to the NO_COLOR environment variable
    console = Console(highlight=False, no_color=None if options.color else True)
    try:
        run(options, MemoryCollector(), console)
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
