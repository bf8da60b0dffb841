#!/usr/bin/env python3
"""
descriptors.py

Debug descriptors extracted from a binary's headers.

A descriptor is one of:
  - MachOUuid     : LC_UUID of a Mach-O image
  - PdbInfo       : CodeView RSDS record of a PE image (path, GUID, age)
  - BuildId       : GNU build-id note of an ELF image
  - GnuDebugLink  : .gnu_debuglink section of an ELF image (file name, CRC32)

Descriptors are immutable. A single binary may expose several kinds at
once (typically BuildId + GnuDebugLink); locator.py decides which one is
tried first.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Union


def _check_len16(name: str, value: bytes) -> None:
    if len(value) != 16:
        raise ValueError(f"{name} must be 16 bytes, got {len(value)}")


@dataclass(frozen=True)
class MachOUuid:
    uuid: bytes

    def __post_init__(self) -> None:
        _check_len16("Mach-O UUID", self.uuid)

    def __str__(self) -> str:
        return str(uuid.UUID(bytes=self.uuid)).upper()


@dataclass(frozen=True)
class PdbInfo:
    """
    CodeView information of a PE image.

    Fields:
        embedded_path: PDB path recorded by the linker (raw bytes).
        guid:          16 raw GUID bytes as stored in the RSDS record.
        age:           PDB age counter.
    """
    embedded_path: bytes
    guid: bytes
    age: int

    def __post_init__(self) -> None:
        _check_len16("PDB GUID", self.guid)

    @property
    def guid_uuid(self) -> uuid.UUID:
        # Data1, Data2 and Data3 are little-endian on disk.
        return uuid.UUID(bytes_le=self.guid)


@dataclass(frozen=True)
class BuildId:
    data: bytes

    def hex(self) -> str:
        return self.data.hex()


@dataclass(frozen=True)
class GnuDebugLink:
    filename: bytes
    crc: int


DebugDescriptor = Union[MachOUuid, PdbInfo, BuildId, GnuDebugLink]

# Dispatch priority of the orchestrator, highest first.
DESCRIPTOR_PRIORITY = (MachOUuid, PdbInfo, BuildId, GnuDebugLink)


__all__ = [
    "MachOUuid",
    "PdbInfo",
    "BuildId",
    "GnuDebugLink",
    "DebugDescriptor",
    "DESCRIPTOR_PRIORITY",
]
