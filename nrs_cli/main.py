"""nrs CLI entrypoint: logging setup, dispatch and error reporting."""

from __future__ import annotations

import logging
import sys
from typing import Sequence

from nrs_core import NrsError, load_settings

from .cli import PREFIX, build_parser


def _configure_logging(verbose: bool) -> None:
    level_name = "DEBUG" if verbose else load_settings().log_level
    level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv: Sequence[str] | None = None) -> int:
    """Parse ``argv`` and run the selected command."""

    parser = build_parser()
    args = parser.parse_args(argv)
    func = getattr(args, "func", None)
    if func is None:
        parser.print_help()
        return 0
    _configure_logging(args.verbose)
    try:
        func(args)
    except NrsError as exc:
        print(f"{PREFIX} error: {exc}", file=sys.stderr)
        return 1
    return 0
