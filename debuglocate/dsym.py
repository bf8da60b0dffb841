#!/usr/bin/env python3
"""
dsym.py

Locate the DWARF file of the dSYM bundle that belongs to a Mach-O binary.

Two phases, first hit wins:

  1) Fastpath, using naming conventions:
       - <binary>.dSYM next to the canonicalized binary
       - every *.dSYM directly under <target>/<profile>/deps and
         <target>/<profile>/examples, where <target>/<profile> is the first
         ancestor of the binary whose own parent is named "target"
         (cargo build output layout)
     Each bundle must hold exactly one file in Contents/Resources/DWARF
     and that file's UUID must match.

  2) Fallback: ask the content index (Spotlight on macOS).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Optional

from .content_index import ContentIndex, NullContentIndex
from .errors import BadPath
from .macho import read_macho_uuids
from .path_utils import PathLike, canonicalize
from .validator import MachOUuidReader, match_dsym_bundle


LOG = logging.getLogger("dsym")

BUILD_OUTPUT_ROOT = "target"
BUILD_OUTPUT_SUBDIRS = ("deps", "examples")


def find_build_output_dir(binary: Path) -> Optional[Path]:
    """
    Walk up from the binary's parent to the first directory whose parent
    is named "target", e.g. /src/proj/target/debug for
    /src/proj/target/debug/deps/foo-1234.
    """
    for ancestor in binary.parents:
        if ancestor.parent.name == BUILD_OUTPUT_ROOT:
            return ancestor
    return None


def _iter_build_output_bundles(channel_dir: Path) -> Iterator[Path]:
    for sub in BUILD_OUTPUT_SUBDIRS:
        try:
            entries = sorted(p for p in (channel_dir / sub).iterdir())
        except OSError:
            continue
        for entry in entries:
            if entry.suffix == ".dSYM":
                yield entry


def locate_dsym_fastpath(
    path: PathLike,
    target_uuid: bytes,
    read_uuids: MachOUuidReader = read_macho_uuids,
) -> Optional[Path]:
    # Canonical path so the build-output walk also works from inside target/.
    try:
        binary = canonicalize(path)
    except BadPath as e:
        LOG.debug("dSYM fastpath skipped: %s", e)
        return None

    sibling = binary.with_name(binary.name + ".dSYM")
    found = match_dsym_bundle(sibling, target_uuid, read_uuids)
    if found is not None:
        return found

    channel_dir = find_build_output_dir(binary)
    if channel_dir is None:
        return None

    LOG.debug("Scanning build output dir %s for dSYM bundles", channel_dir)
    for bundle in _iter_build_output_bundles(channel_dir):
        found = match_dsym_bundle(bundle, target_uuid, read_uuids)
        if found is not None:
            return found

    return None


def locate_dsym(
    path: PathLike,
    target_uuid: bytes,
    content_index: Optional[ContentIndex] = None,
    read_uuids: MachOUuidReader = read_macho_uuids,
) -> Optional[Path]:
    """
    Locate the dSYM DWARF file for the Mach-O binary at `path` whose
    LC_UUID is `target_uuid`.
    """
    found = locate_dsym_fastpath(path, target_uuid, read_uuids)
    if found is not None:
        return found

    if content_index is None:
        content_index = NullContentIndex()

    try:
        return content_index.find_dsym(target_uuid)
    except Exception as e:
        LOG.warning("Content index lookup failed: %s", e)
        return None


__all__ = [
    "find_build_output_dir",
    "locate_dsym_fastpath",
    "locate_dsym",
]
