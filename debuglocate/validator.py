#!/usr/bin/env python3
"""
validator.py

Candidate validation.

A path found by naming convention is never trusted on its own: the file
is opened and parsed, and its embedded identity is compared with the one
recorded in the original binary.

Every failure while validating (missing file, unreadable file, wrong
format, parser bug) means "not a match". Nothing here raises.
"""

from __future__ import annotations

import logging
import uuid
from pathlib import Path
from typing import Callable, Iterable, Optional

from .macho import read_macho_uuids
from .pdb_reader import PdbIdentity, read_pdb_identity


LOG = logging.getLogger("validator")

MachOUuidReader = Callable[[Path], Iterable[bytes]]
PdbIdentityReader = Callable[[Path], PdbIdentity]

DSYM_DWARF_SUBDIR = Path("Contents") / "Resources" / "DWARF"


def dsym_dwarf_file(dsym_dir: Path) -> Optional[Path]:
    """
    Return the single file inside <dsym_dir>/Contents/Resources/DWARF.

    None if the directory cannot be listed or does not hold exactly one
    entry.
    """
    dwarf_dir = dsym_dir / DSYM_DWARF_SUBDIR
    try:
        entries = list(dwarf_dir.iterdir())
    except OSError:
        return None

    if len(entries) != 1:
        LOG.debug("%s: expected one entry, found %d", dwarf_dir, len(entries))
        return None
    return entries[0]


def macho_uuid_matches(
    candidate: Path,
    target: bytes,
    read_uuids: MachOUuidReader = read_macho_uuids,
) -> bool:
    """Parse `candidate` as Mach-O and compare its UUID(s) with `target`."""
    try:
        found = list(read_uuids(candidate))
    except Exception as e:
        LOG.debug("Cannot read Mach-O UUID from %s: %s", candidate, e)
        return False

    if target in found:
        return True

    LOG.debug(
        "UUID mismatch for %s: want %s, have %s",
        candidate,
        target.hex(),
        [u.hex() for u in found],
    )
    return False


def match_dsym_bundle(
    dsym_dir: Path,
    target: bytes,
    read_uuids: MachOUuidReader = read_macho_uuids,
) -> Optional[Path]:
    """
    Validate a dSYM bundle; return its DWARF file when the UUID matches.
    """
    dwarf_file = dsym_dwarf_file(dsym_dir)
    if dwarf_file is None:
        return None
    if macho_uuid_matches(dwarf_file, target, read_uuids):
        return dwarf_file
    return None


def pdb_matches(
    candidate: Path,
    guid: uuid.UUID,
    age: int,
    read_identity: PdbIdentityReader = read_pdb_identity,
) -> bool:
    """Open `candidate` as a PDB and compare its age and GUID."""
    try:
        identity = read_identity(candidate)
    except Exception as e:
        LOG.debug("Not a usable PDB: %s (%s)", candidate, e)
        return False

    if identity.age == age and identity.guid == guid:
        return True

    LOG.debug(
        "PDB mismatch for %s: want %s/%d, have %s/%d",
        candidate,
        guid,
        age,
        identity.guid,
        identity.age,
    )
    return False


__all__ = [
    "MachOUuidReader",
    "PdbIdentityReader",
    "DSYM_DWARF_SUBDIR",
    "dsym_dwarf_file",
    "macho_uuid_matches",
    "match_dsym_bundle",
    "pdb_matches",
]
