from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .api import RunOptions, make_vm
from .cells import CELL_WIDTHS
from .errors import BFTError, format_error
from .program import Program

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bft", description="A bft program interpreter.")
    parser.add_argument("program", metavar="PROGRAM", type=Path, help="Input file with bft program")
    parser.add_argument("-c", "--cells", type=int, default=0, help="Number of cells in memory (default 30000)")
    parser.add_argument("-e", "--extensible", action="store_true", help="Grow memory when the head moves past its end")
    parser.add_argument("--cell-width", type=int, choices=CELL_WIDTHS, default=8, help="Bits per memory cell (default 8)")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Log more (repeat for debug output)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.cells < 0:
        parser.error("--cells must not be negative")

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(name)s: %(levelname)s: %(message)s")

    try:
        source = args.program.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        reason = getattr(e, "strerror", None) or e
        print(f"bft: error: couldn't read {args.program}: {reason}", file=sys.stderr)
        return 2

    options = RunOptions(tape_size=args.cells, elastic=args.extensible, cell_width=args.cell_width)
    program = Program.from_source(source, args.program)
    try:
        program.check_syntax()
        vm = make_vm(program, options)
        logger.info("running %s (%d instructions)", args.program, len(program))
        vm.run(sys.stdin.buffer, sys.stdout.buffer)
    except BFTError as e:
        print(f"bft: error: {program.filename}: {format_error(e, source)}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
