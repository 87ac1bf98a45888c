"""
Command-line interface for the simple mapper.
"""

import argparse
import logging
import sys

from simple_mapper.application import DEFAULT_OUT_PREFIX, Application
from simple_mapper.config import CompoundConfig
from simple_mapper.mapspace import Dimension


logger = logging.getLogger("simple_mapper")


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Simple mapper - exhaustive mapping search for DNN accelerators"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # =========================================
    # run command
    # =========================================
    run_parser = subparsers.add_parser(
        "run",
        help="Search the mapspace and report the best mapping"
    )
    run_parser.add_argument(
        "configs",
        nargs="+",
        help="YAML config files (problem, architecture, mapspace constraints)"
    )
    run_parser.add_argument(
        "-o", "--output-prefix",
        default=DEFAULT_OUT_PREFIX,
        help=f"Prefix of the output files (default: {DEFAULT_OUT_PREFIX})"
    )
    run_parser.add_argument(
        "--progress",
        action="store_true",
        help="Show a progress bar"
    )
    run_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output"
    )

    # =========================================
    # info command
    # =========================================
    info_parser = subparsers.add_parser(
        "info",
        help="Display workload, architecture and mapspace sizes"
    )
    info_parser.add_argument(
        "configs",
        nargs="+",
        help="YAML config files"
    )
    info_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output"
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    if args.command == "run":
        return cmd_run(args)
    elif args.command == "info":
        return cmd_info(args)
    else:
        parser.print_help()
        return 1


def _build_application(args, **kwargs):
    try:
        config = CompoundConfig(args.configs)
        return Application(config, **kwargs)
    except (ValueError, KeyError, FileNotFoundError, RuntimeError) as e:
        logger.error(f"ERROR: {e}")
        if args.verbose:
            logger.exception("Startup failed")
        return None


def cmd_run(args) -> int:
    """Execute run command."""
    app = _build_application(
        args,
        out_prefix=args.output_prefix,
        progress=args.progress,
    )
    if app is None:
        return 1

    app.run()
    return 0


def cmd_info(args) -> int:
    """Execute info command."""
    app = _build_application(args)
    if app is None:
        return 1

    print(app.workload.summary())
    print()
    print(app.arch_specs.summary())
    print()
    print("Mapspace")
    for dim in Dimension:
        print(f"  {dim.label}: {app.mapspace.size(dim)}")
    print(f"  Total: {app.mapspace.total_size()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
