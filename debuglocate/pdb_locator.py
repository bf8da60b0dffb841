#!/usr/bin/env python3
"""
pdb_locator.py

Locate the PDB file of a PE binary.

Search order follows the Windows debugger symbol-path rules:

  1) the PDB path embedded in the CodeView record, as-is
  2) every directory of _NT_SYMBOL_PATH
  3) every directory of _NT_ALT_SYMBOL_PATH
  4) the directory of the canonicalized binary

For each directory in 2-4, three layouts are tried:

    <dir>/<name>.pdb
    <dir>/<ext>/<name>.pdb
    <dir>/symbols/<ext>/<name>.pdb

with <name>/<ext> taken from the binary file name (app.dll -> app / dll).
Symbol-server entries (srv*..., cache*...) are not supported and skipped.

Every candidate is opened and its GUID and age are compared with the
CodeView record; only a matching file is returned.
"""

from __future__ import annotations

import logging
import os
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Mapping, Optional

from .config import NT_ALT_SYMBOL_PATH, NT_SYMBOL_PATH
from .descriptors import PdbInfo
from .path_utils import PathLike, canonicalize, path_from_bytes
from .pdb_reader import read_pdb_identity
from .validator import PdbIdentityReader, pdb_matches


LOG = logging.getLogger("pdb_locator")

UNSUPPORTED_PREFIXES = ("srv*", "cache*")


@dataclass
class _Target:
    guid: uuid.UUID
    age: int
    read_identity: PdbIdentityReader

    def matches(self, candidate: Path) -> bool:
        return pdb_matches(candidate, self.guid, self.age, self.read_identity)


# ---------------------------------------------------------------------------
# Search paths
# ---------------------------------------------------------------------------

def split_search_path(value: Optional[str]) -> List[str]:
    """
    Split a ';'-separated symbol path, keeping order.

    Empty entries are dropped; srv* / cache* entries are kept here and
    skipped by the search.
    """
    if not value:
        return []
    return [entry for entry in value.split(";") if entry]


def is_unsupported_entry(entry: str) -> bool:
    return entry.startswith(UNSUPPORTED_PREFIXES)


def search_dir_candidates(search_dir: Path, binary_name: str) -> List[Path]:
    """
    The three conventional PDB locations under `search_dir` for a binary
    named `binary_name`. Empty when the name has no extension.
    """
    name = Path(binary_name)
    ext = name.suffix[1:]
    if not ext:
        return []

    pdb_name = name.stem + ".pdb"
    return [
        search_dir / pdb_name,
        search_dir / ext / pdb_name,
        search_dir / "symbols" / ext / pdb_name,
    ]


def _search_dir(search_dir: str, binary_name: str, target: _Target) -> Optional[Path]:
    if is_unsupported_entry(search_dir):
        LOG.debug("Skipping unsupported symbol path entry: %s", search_dir)
        return None

    base = Path(search_dir)
    if not base.exists():
        return None

    for candidate in search_dir_candidates(base, binary_name):
        if target.matches(candidate):
            return candidate
    return None


def _iter_env_dirs(env_var: str, environ: Mapping[str, str]) -> Iterator[str]:
    yield from split_search_path(environ.get(env_var))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def locate_pdb(
    path: PathLike,
    pdb_info: PdbInfo,
    read_identity: PdbIdentityReader = read_pdb_identity,
    environ: Optional[Mapping[str, str]] = None,
) -> Optional[Path]:
    """
    Locate the PDB for the binary at `path`.

    Raises PathEncodingError when the embedded path is not valid path text
    and BadPath when the module directory step cannot canonicalize `path`.
    """
    if environ is None:
        environ = os.environ

    target = _Target(guid=pdb_info.guid_uuid, age=pdb_info.age, read_identity=read_identity)

    if pdb_info.embedded_path:
        embedded = path_from_bytes(pdb_info.embedded_path)
        if target.matches(embedded):
            return embedded

    binary_name = Path(os.fsdecode(path)).name

    for env_var in (NT_SYMBOL_PATH, NT_ALT_SYMBOL_PATH):
        for search_dir in _iter_env_dirs(env_var, environ):
            found = _search_dir(search_dir, binary_name, target)
            if found is not None:
                LOG.debug("PDB found via %s: %s", env_var, found)
                return found

    binary = canonicalize(path)
    return _search_dir(str(binary.parent), binary.name, target)


__all__ = [
    "UNSUPPORTED_PREFIXES",
    "split_search_path",
    "is_unsupported_entry",
    "search_dir_candidates",
    "locate_pdb",
]
