#!/usr/bin/env python3
"""
config.py

Settings for one resolution call.

SearchConfig bundles the global debug directory, the debug-link CRC
policy, the content-index capability and the readers used to validate
candidates. Defaults match a stock system; tests swap in fakes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .build_id import DEFAULT_DEBUG_ROOT
from .content_index import ContentIndex, default_content_index
from .macho import read_macho_uuids
from .pdb_reader import read_pdb_identity
from .validator import MachOUuidReader, PdbIdentityReader

NT_SYMBOL_PATH = "_NT_SYMBOL_PATH"
NT_ALT_SYMBOL_PATH = "_NT_ALT_SYMBOL_PATH"


@dataclass(frozen=True)
class SearchConfig:
    debug_root: Path = DEFAULT_DEBUG_ROOT
    verify_crc: bool = True
    content_index: ContentIndex = field(default_factory=default_content_index)
    read_macho_uuids: MachOUuidReader = read_macho_uuids
    read_pdb_identity: PdbIdentityReader = read_pdb_identity


__all__ = [
    "NT_SYMBOL_PATH",
    "NT_ALT_SYMBOL_PATH",
    "SearchConfig",
]
