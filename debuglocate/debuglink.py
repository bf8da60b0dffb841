#!/usr/bin/env python3
"""
debuglink.py

Locate a separate debug file named by an ELF .gnu_debuglink section.

Search order (first hit wins), with <dir> the directory of the
canonicalized binary:

  1) <dir>/<filename>            (skipped when it is the binary itself)
  2) <dir>/.debug/<filename>
  3) <debug_root><dir>/<filename>  (debug_root defaults to /usr/lib/debug)

The debug-link section also records a CRC32 of the debug file. When
verify_crc is on, a candidate whose CRC differs is passed over.
"""

from __future__ import annotations

import logging
import zlib
from pathlib import Path
from typing import List, Optional, Union

from .build_id import DEFAULT_DEBUG_ROOT
from .errors import BadPath
from .path_utils import PathLike, canonicalize, path_from_bytes


LOG = logging.getLogger("debuglink")

_CRC_CHUNK = 1 << 20


def file_crc32(path: Path) -> int:
    """CRC32 (zlib / gnu_debuglink flavour) of the whole file."""
    crc = 0
    with open(path, "rb") as f:
        while True:
            chunk = f.read(_CRC_CHUNK)
            if not chunk:
                break
            crc = zlib.crc32(chunk, crc)
    return crc & 0xFFFFFFFF


def _crc_matches(path: Path, crc: int) -> bool:
    try:
        actual = file_crc32(path)
    except OSError as e:
        LOG.debug("Cannot read %s for CRC check: %s", path, e)
        return False

    if actual != crc:
        LOG.debug("CRC mismatch for %s: want %08x, have %08x", path, crc, actual)
        return False
    return True


def debuglink_candidates(
    binary: Path,
    filename: Path,
    debug_root: Union[str, Path] = DEFAULT_DEBUG_ROOT,
) -> List[Path]:
    """
    Candidate paths for `filename`, in search order.

    `binary` must already be canonical.
    """
    parent = binary.parent
    candidates: List[Path] = []

    same_dir = parent / filename
    if same_dir != binary:
        candidates.append(same_dir)

    candidates.append(parent / ".debug" / filename)

    rel_parent = parent.relative_to(parent.anchor)
    candidates.append(Path(debug_root) / rel_parent / filename)
    return candidates


def locate_gnu_debuglink(
    path: PathLike,
    filename: Union[bytes, str, Path],
    crc: int,
    debug_root: Union[str, Path] = DEFAULT_DEBUG_ROOT,
    verify_crc: bool = True,
) -> Optional[Path]:
    """
    Find the debug file for the binary at `path`.

    Raises BadPath when `path` cannot be canonicalized or has no parent
    directory.
    """
    binary = canonicalize(path)
    if binary.parent == binary:
        raise BadPath(f"{binary} has no parent directory")

    debug_name = path_from_bytes(filename)

    for candidate in debuglink_candidates(binary, debug_name, debug_root):
        if not candidate.exists():
            continue
        if verify_crc and not _crc_matches(candidate, crc):
            continue
        LOG.debug("Found debug-link target: %s", candidate)
        return candidate

    return None


__all__ = [
    "file_crc32",
    "debuglink_candidates",
    "locate_gnu_debuglink",
]
