"""Command-line entry point.

Usage:
  PYTHONPATH="$(lldb -P)" heapscope --pid 12345
  PYTHONPATH="$(lldb -P)" heapscope --core core.12345 --executable /usr/lib/jvm/bin/java --regions
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console

from heapscope.core.errors import HeapscopeError
from heapscope.core.heapscope import Heapscope
from heapscope.core.types.config import load_config
from heapscope.core.walker import exclude_non_live, include_all

logger = logging.getLogger(__name__)


def _address(text: str) -> int:
    return int(text, 0)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="heapscope",
        description="Inspect the region table of a paused or dumped collector heap.",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--pid", type=int, help="PID of a running process to attach to")
    source.add_argument("--name", help="Name of a running process to attach to")
    source.add_argument("--core", help="Core file to load (requires --executable)")
    parser.add_argument("--executable", help="Binary that produced the core file")
    parser.add_argument(
        "--heap-address",
        type=_address,
        help="Address of the heap object, skipping the heap symbol lookup",
    )
    parser.add_argument("--config", help="Path to heapscope.toml")
    parser.add_argument("--regions", action="store_true", help="List regions")
    parser.add_argument(
        "--all",
        action="store_true",
        help="List every region, including non-live ones (implies --regions)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.core and not args.executable:
        parser.error("--core requires --executable")

    config = load_config(args.config)
    if args.verbose:
        config.verbose = True

    console = Console()
    try:
        with Heapscope(config=config) as scope:
            if args.core:
                scope.load_core(args.executable, args.core, heap_address=args.heap_address)
            elif args.name:
                scope.attach_by_name(args.name, heap_address=args.heap_address)
            else:
                scope.attach(args.pid, heap_address=args.heap_address)

            scope.reporter.print_on(
                console,
                regions=args.regions or args.all,
                region_filter=include_all if args.all else exclude_non_live,
            )
    except (HeapscopeError, RuntimeError) as exc:
        logger.debug("Inspection failed", exc_info=True)
        print(f"heapscope: error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
