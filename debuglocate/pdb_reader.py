#!/usr/bin/env python3
"""
pdb_reader.py

Read the identity (GUID + age) of a PDB file with pdbparse.

Only MSF 7.00 containers are accepted; older MSF 2.00 files carry no GUID.
Only the PDB information stream (stream 1) is loaded; type and debug
streams are left alone.
"""

from __future__ import annotations

import struct
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Union

import pdbparse

PDB7_SIGNATURE = b"Microsoft C/C++ MSF 7.00\r\n\x1aDS\0\0\0"


@dataclass(frozen=True)
class PdbIdentity:
    age: int
    guid: uuid.UUID


def _guid_from_container(guid) -> uuid.UUID:
    raw = struct.pack("<IHH", guid.Data1, guid.Data2, guid.Data3) + bytes(guid.Data4)
    return uuid.UUID(bytes_le=raw)


def read_pdb_identity(path: Union[str, Path]) -> PdbIdentity:
    """
    Open `path` as a PDB container and return its recorded age and GUID.

    Raises on I/O errors and on files that are not PDBs.
    """
    with open(path, "rb") as f:
        if f.read(len(PDB7_SIGNATURE)) != PDB7_SIGNATURE:
            raise ValueError(f"{path}: not an MSF 7.00 PDB")
        f.seek(0)

        pdb = pdbparse.PDB7(f, fast_load=True)
        info = pdb.STREAM_PDB
        info.load()
        return PdbIdentity(age=int(info.Age), guid=_guid_from_container(info.GUID))


__all__ = [
    "PDB7_SIGNATURE",
    "PdbIdentity",
    "read_pdb_identity",
]
