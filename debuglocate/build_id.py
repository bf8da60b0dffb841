#!/usr/bin/env python3
"""
build_id.py

Locate a separate debug file by GNU build-id.

Layout:
    <debug_root>/.build-id/<aa>/<bbbbbbbb...>.debug
where "aa" is the first build-id byte and the rest of the bytes follow,
both in lower-case two-digit hex.

Build-id paths are content-addressed, so existence is the only check.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from .errors import TooShort


LOG = logging.getLogger("build_id")

DEFAULT_DEBUG_ROOT = Path("/usr/lib/debug")


def build_id_debug_path(
    build_id: bytes,
    debug_root: Union[str, Path] = DEFAULT_DEBUG_ROOT,
) -> Path:
    """
    Return the conventional debug file path for `build_id`.

    Raises TooShort for build-ids with fewer than 2 bytes.
    """
    if len(build_id) < 2:
        raise TooShort(f"build-id too short: {len(build_id)} byte(s)")

    subdir = f"{build_id[0]:02x}"
    rest = build_id[1:].hex()
    return Path(debug_root) / ".build-id" / subdir / (rest + ".debug")


def locate_debug_build_id(
    build_id: bytes,
    debug_root: Union[str, Path] = DEFAULT_DEBUG_ROOT,
) -> Optional[Path]:
    candidate = build_id_debug_path(build_id, debug_root)
    if candidate.exists():
        return candidate

    LOG.debug("Debug file not found for build-id %s: %s", build_id.hex(), candidate)
    return None


__all__ = [
    "DEFAULT_DEBUG_ROOT",
    "build_id_debug_path",
    "locate_debug_build_id",
]
