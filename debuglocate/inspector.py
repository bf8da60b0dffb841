#!/usr/bin/env python3
"""
inspector.py

Extract debug descriptors from a binary.

The container format is detected from the leading magic bytes:
  - ELF    (pyelftools): GNU build-id note, .gnu_debuglink section
  - Mach-O (macholib)  : LC_UUID (first slice of a fat file)
  - PE     (pefile)    : CodeView RSDS record in the debug directory

Unknown formats have no descriptors.
"""

from __future__ import annotations

import logging
import os
import struct
from pathlib import Path
from typing import List, Optional, Tuple

import pefile
from elftools.common.exceptions import ELFError
from elftools.elf.elffile import ELFFile
from elftools.elf.sections import NoteSection

from .descriptors import BuildId, DebugDescriptor, GnuDebugLink, MachOUuid, PdbInfo
from .errors import InspectError
from .macho import is_macho_magic, read_macho_uuids
from .path_utils import PathLike


LOG = logging.getLogger("inspector")

ELF_MAGIC = b"\x7fELF"
PE_MAGIC = b"MZ"
CODEVIEW_RSDS = b"RSDS"


def _read_head(path: PathLike, size: int = 4) -> bytes:
    with open(path, "rb") as f:
        return f.read(size)


# ---------------------------------------------------------------------------
# ELF
# ---------------------------------------------------------------------------

def parse_debuglink_section(data: bytes, little_endian: bool) -> Tuple[bytes, int]:
    """
    Decode .gnu_debuglink contents: NUL-terminated file name, padding to a
    4-byte boundary, then the CRC32 in the file's byte order.
    """
    nul = data.find(b"\0")
    if nul < 0:
        raise InspectError(".gnu_debuglink has no NUL-terminated file name")

    crc_off = (nul + 1 + 3) & ~3
    if crc_off + 4 > len(data):
        raise InspectError(".gnu_debuglink is truncated")

    fmt = "<I" if little_endian else ">I"
    (crc,) = struct.unpack_from(fmt, data, crc_off)
    return data[:nul], crc


def _elf_descriptors(path: PathLike) -> List[DebugDescriptor]:
    out: List[DebugDescriptor] = []
    with open(path, "rb") as f:
        try:
            elf = ELFFile(f)
            build_id: Optional[bytes] = None
            for section in elf.iter_sections():
                if not isinstance(section, NoteSection):
                    continue
                for note in section.iter_notes():
                    if note["n_type"] == "NT_GNU_BUILD_ID":
                        build_id = bytes.fromhex(note["n_desc"])
                        break
                if build_id is not None:
                    break

            link = elf.get_section_by_name(".gnu_debuglink")
            link_data = link.data() if link is not None else None
        except ELFError as e:
            raise InspectError(f"{os.fspath(path)}: bad ELF file: {e}") from e

        if build_id is not None:
            out.append(BuildId(build_id))
        if link_data is not None:
            filename, crc = parse_debuglink_section(link_data, elf.little_endian)
            out.append(GnuDebugLink(filename=filename, crc=crc))
    return out


# ---------------------------------------------------------------------------
# Mach-O
# ---------------------------------------------------------------------------

def _macho_descriptors(path: PathLike) -> List[DebugDescriptor]:
    try:
        uuids = read_macho_uuids(path)
    except (ValueError, struct.error) as e:
        raise InspectError(f"{os.fspath(path)}: bad Mach-O file: {e}") from e

    if not uuids:
        return []
    return [MachOUuid(uuids[0])]


# ---------------------------------------------------------------------------
# PE
# ---------------------------------------------------------------------------

def parse_codeview_rsds(data: bytes) -> Optional[PdbInfo]:
    """Decode a CV_INFO_PDB70 record, or None for other CodeView kinds."""
    if len(data) < 24 or data[:4] != CODEVIEW_RSDS:
        return None
    guid = data[4:20]
    (age,) = struct.unpack_from("<I", data, 20)
    pdb_path = data[24:].split(b"\0", 1)[0]
    return PdbInfo(embedded_path=pdb_path, guid=guid, age=age)


def _pe_descriptors(path: PathLike) -> List[DebugDescriptor]:
    try:
        pe = pefile.PE(os.fspath(path), fast_load=True)
    except pefile.PEFormatError as e:
        raise InspectError(f"{os.fspath(path)}: bad PE file: {e}") from e

    try:
        pe.parse_data_directories(
            directories=[pefile.DIRECTORY_ENTRY["IMAGE_DIRECTORY_ENTRY_DEBUG"]]
        )
        for entry in getattr(pe, "DIRECTORY_ENTRY_DEBUG", []):
            if entry.struct.Type != pefile.DEBUG_TYPE["IMAGE_DEBUG_TYPE_CODEVIEW"]:
                continue
            data = pe.get_data(entry.struct.AddressOfRawData, entry.struct.SizeOfData)
            info = parse_codeview_rsds(data)
            if info is not None:
                return [info]
    except pefile.PEFormatError as e:
        raise InspectError(f"{os.fspath(path)}: bad PE debug directory: {e}") from e
    finally:
        pe.close()
    return []


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def read_debug_descriptors(path: PathLike) -> List[DebugDescriptor]:
    """
    Return the debug descriptors of the binary at `path`.

    OSError from opening the file propagates; a recognised but malformed
    container raises InspectError.
    """
    head = _read_head(path)

    if head == ELF_MAGIC:
        descriptors = _elf_descriptors(path)
    elif is_macho_magic(head):
        descriptors = _macho_descriptors(path)
    elif head[:2] == PE_MAGIC:
        descriptors = _pe_descriptors(path)
    else:
        LOG.debug("Unrecognised binary format: %s", Path(os.fsdecode(path)))
        descriptors = []

    LOG.debug("Descriptors for %s: %s", os.fsdecode(path), descriptors)
    return descriptors


__all__ = [
    "parse_debuglink_section",
    "parse_codeview_rsds",
    "read_debug_descriptors",
]
