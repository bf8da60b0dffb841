#!/usr/bin/env python3
"""
locator.py

Top-level entry point: pick a strategy from the binary's debug
descriptors and return the path of its separate debug file.

Dispatch priority:

  1) MachOUuid     -> dSYM lookup
  2) PdbInfo       -> PDB lookup
  3) BuildId       -> /usr/lib/debug/.build-id lookup; when nothing is
                      found, continue with 4
  4) GnuDebugLink  -> debug-link lookup

A binary without any descriptor simply has no debug file to find:
the result is None, not an error.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, Optional, Type, Union

from .build_id import locate_debug_build_id
from .config import SearchConfig
from .debuglink import locate_gnu_debuglink
from .descriptors import (
    DESCRIPTOR_PRIORITY,
    BuildId,
    DebugDescriptor,
    GnuDebugLink,
    MachOUuid,
    PdbInfo,
)
from .dsym import locate_dsym
from .errors import TooShort
from .inspector import read_debug_descriptors
from .path_utils import PathLike
from .pdb_locator import locate_pdb


LOG = logging.getLogger("locator")


def _by_kind(
    descriptors: Union[DebugDescriptor, Iterable[DebugDescriptor]],
) -> Dict[Type, DebugDescriptor]:
    """First descriptor of each kind."""
    if isinstance(descriptors, DESCRIPTOR_PRIORITY):
        descriptors = [descriptors]

    out: Dict[Type, DebugDescriptor] = {}
    for d in descriptors:
        if not isinstance(d, DESCRIPTOR_PRIORITY):
            raise TypeError(f"not a debug descriptor: {d!r}")
        out.setdefault(type(d), d)
    return out


def _dispatch(
    kinds: Dict[Type, DebugDescriptor],
    original_path: PathLike,
    config: SearchConfig,
) -> Optional[Path]:
    macho = kinds.get(MachOUuid)
    if macho is not None:
        LOG.info("Looking for dSYM of %s (UUID %s)", original_path, macho)
        return locate_dsym(
            original_path,
            macho.uuid,
            content_index=config.content_index,
            read_uuids=config.read_macho_uuids,
        )

    pdb = kinds.get(PdbInfo)
    if pdb is not None:
        LOG.info("Looking for PDB of %s (GUID %s, age %d)", original_path, pdb.guid_uuid, pdb.age)
        return locate_pdb(original_path, pdb, read_identity=config.read_pdb_identity)

    build_id = kinds.get(BuildId)
    if build_id is not None:
        LOG.info("Looking up build-id %s", build_id.hex())
        try:
            found = locate_debug_build_id(build_id.data, config.debug_root)
        except TooShort as e:
            LOG.debug("Ignoring build-id: %s", e)
            found = None
        if found is not None:
            return found

    link = kinds.get(GnuDebugLink)
    if link is not None:
        LOG.info("Following debug link %r of %s", link.filename, original_path)
        return locate_gnu_debuglink(
            original_path,
            link.filename,
            link.crc,
            debug_root=config.debug_root,
            verify_crc=config.verify_crc,
        )

    if not kinds:
        LOG.info("No debug descriptor for %s", original_path)
    return None


def locate(
    descriptors: Union[DebugDescriptor, Iterable[DebugDescriptor]],
    original_path: PathLike,
    config: Optional[SearchConfig] = None,
) -> Optional[Path]:
    """
    Locate the separate debug file for the binary at `original_path`.

    Parameters:
        descriptors:
            One descriptor or any iterable of descriptors of that binary.
        original_path:
            Path of the binary itself.
        config:
            Search settings; SearchConfig() when omitted.

    Returns:
        Path of the debug file, or None when it cannot be found.

    Raises:
        BadPath / PathEncodingError when the search cannot proceed.
    """
    if config is None:
        config = SearchConfig()

    found = _dispatch(_by_kind(descriptors), original_path, config)
    if found is None:
        LOG.info("No debug file found for %s", original_path)
    else:
        LOG.info("Debug file for %s: %s", original_path, found)
    return found


def locate_debug_symbols(
    path: PathLike,
    config: Optional[SearchConfig] = None,
) -> Optional[Path]:
    """
    Read the debug descriptors of the binary at `path` and locate its
    debug file.
    """
    descriptors = read_debug_descriptors(path)
    return locate(descriptors, path, config)


__all__ = [
    "locate",
    "locate_debug_symbols",
]
