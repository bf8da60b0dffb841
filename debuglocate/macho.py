#!/usr/bin/env python3
"""
macho.py

Mach-O helpers backed by macholib.

Used both to validate dSYM candidates and to read the UUID of the
original binary. Fat (universal) files carry one UUID per architecture
slice; all of them are returned.
"""

from __future__ import annotations

import os
import struct
from pathlib import Path
from typing import List, Union

from macholib.MachO import MachO
from macholib.mach_o import LC_UUID

# MH_MAGIC, MH_MAGIC_64, their byte-swapped forms, and FAT_MAGIC(_64).
MACHO_MAGICS = frozenset(
    (
        0xFEEDFACE,
        0xFEEDFACF,
        0xCEFAEDFE,
        0xCFFAEDFE,
        0xCAFEBABE,
        0xCAFEBABF,
    )
)


def is_macho_magic(head: bytes) -> bool:
    if len(head) < 4:
        return False
    (magic,) = struct.unpack(">I", head[:4])
    return magic in MACHO_MAGICS


def read_macho_uuids(path: Union[str, Path]) -> List[bytes]:
    """
    Return the LC_UUID payloads of every slice of the Mach-O file at `path`.

    Raises whatever macholib raises for unreadable or malformed files.
    """
    macho = MachO(os.fspath(path))
    uuids: List[bytes] = []
    for header in macho.headers:
        for load_cmd, cmd, _data in header.commands:
            if load_cmd.cmd == LC_UUID:
                uuids.append(bytes(cmd.uuid))
    return uuids


__all__ = [
    "MACHO_MAGICS",
    "is_macho_magic",
    "read_macho_uuids",
]
