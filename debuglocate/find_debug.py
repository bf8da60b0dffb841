#!/usr/bin/env python3
"""
find_debug.py

Command-line front end: print the separate debug file of a binary.

Exit status:
  0  debug file found (path printed on stdout)
  1  no debug file found
  2  the search could not run (bad path, unreadable binary, ...)
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .build_id import DEFAULT_DEBUG_ROOT
from .config import SearchConfig
from .content_index import NullContentIndex, default_content_index
from .errors import DebugLocateError
from .locator import locate_debug_symbols


LOG = logging.getLogger("find_debug")

EXIT_FOUND = 0
EXIT_NOT_FOUND = 1
EXIT_ERROR = 2


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="find-debug",
        description="Locate the separate debug-info file (dSYM, PDB, .debug) of a binary.",
    )
    p.add_argument(
        "binary",
        metavar="BINARY",
        help="Path to the ELF, Mach-O or PE binary.",
    )
    p.add_argument(
        "--debug-root",
        default=str(DEFAULT_DEBUG_ROOT),
        help=f"Global debug directory (default: {DEFAULT_DEBUG_ROOT}).",
    )
    p.add_argument(
        "--no-verify-crc",
        dest="verify_crc",
        action="store_false",
        help="Accept .gnu_debuglink targets without checking their CRC32.",
    )
    p.add_argument(
        "--no-content-index",
        dest="content_index",
        action="store_false",
        help="Do not query Spotlight for dSYM bundles.",
    )
    p.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging.",
    )
    return p


def config_from_args(args: argparse.Namespace) -> SearchConfig:
    index = default_content_index() if args.content_index else NullContentIndex()
    return SearchConfig(
        debug_root=Path(args.debug_root),
        verify_crc=args.verify_crc,
        content_index=index,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_argparser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )

    config = config_from_args(args)

    try:
        found = locate_debug_symbols(args.binary, config)
    except (DebugLocateError, OSError) as e:
        LOG.error("%s", e)
        return EXIT_ERROR

    if found is None:
        return EXIT_NOT_FOUND

    print(found)
    return EXIT_FOUND


if __name__ == "__main__":
    sys.exit(main())
