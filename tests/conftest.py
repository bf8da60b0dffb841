"""Shared fixtures and minimal binary writers for the test-suite."""

from __future__ import annotations

import struct
import uuid
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from debuglocate.config import SearchConfig
from debuglocate.content_index import ContentIndex
from debuglocate.pdb_reader import PDB7_SIGNATURE, PdbIdentity

UUID_A = bytes(range(16))
UUID_B = bytes(range(16, 32))


def write_macho(path: Path, macho_uuid: bytes) -> Path:
    """Write a 64-bit little-endian MH_DSYM file with a single LC_UUID."""
    path.parent.mkdir(parents=True, exist_ok=True)
    header = struct.pack(
        "<IiiIIIII",
        0xFEEDFACF,  # MH_MAGIC_64
        0x01000007,  # CPU_TYPE_X86_64
        3,
        0xA,  # MH_DSYM
        1,
        24,
        0,
        0,
    )
    lc_uuid = struct.pack("<II16s", 0x1B, 24, macho_uuid)
    path.write_bytes(header + lc_uuid)
    return path


def write_dsym(bundle: Path, macho_uuid: bytes, name: str = "app") -> Path:
    return write_macho(bundle / "Contents" / "Resources" / "DWARF" / name, macho_uuid)


def _pad4(data: bytes) -> bytes:
    return data + b"\0" * (-len(data) % 4)


def write_elf(
    path: Path,
    build_id: Optional[bytes] = None,
    debuglink: Optional[bytes] = None,
    crc: int = 0,
) -> Path:
    """
    Write a section-only ELF64 little-endian file with an optional
    .note.gnu.build-id and an optional .gnu_debuglink section.
    """
    sections: List[Dict] = []
    if build_id is not None:
        note = struct.pack("<III", 4, len(build_id), 3) + b"GNU\0" + _pad4(build_id)
        sections.append({"name": b".note.gnu.build-id", "type": 7, "data": note, "align": 4})
    if debuglink is not None:
        link = _pad4(debuglink + b"\0") + struct.pack("<I", crc)
        sections.append({"name": b".gnu_debuglink", "type": 1, "data": link, "align": 4})

    shstrtab = b"\0"
    for s in sections:
        s["name_off"] = len(shstrtab)
        shstrtab += s["name"] + b"\0"
    shstrtab_name = len(shstrtab)
    shstrtab += b".shstrtab\0"
    sections.append({"name_off": shstrtab_name, "type": 3, "data": shstrtab, "align": 1})

    body = b""
    offset = 64
    for s in sections:
        s["offset"] = offset + len(body)
        body += _pad4(s["data"])
    shoff = offset + len(body)

    shnum = len(sections) + 1
    ehdr = b"\x7fELF" + bytes([2, 1, 1, 0]) + b"\0" * 8
    ehdr += struct.pack(
        "<HHIQQQIHHHHHH",
        2,  # ET_EXEC
        62,  # EM_X86_64
        1,
        0,
        0,
        shoff,
        0,
        64,
        56,
        0,
        64,
        shnum,
        shnum - 1,
    )

    shdrs = b"\0" * 64
    for s in sections:
        shdrs += struct.pack(
            "<IIQQQQIIQQ",
            s["name_off"],
            s["type"],
            0,
            0,
            s["offset"],
            len(s["data"]),
            0,
            0,
            s["align"],
            0,
        )

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(ehdr + body + shdrs)
    return path


PDB_PAGE_SIZE = 0x400


def write_pdb(path: Path, guid_raw: bytes, age: int) -> Path:
    """
    Write a five-page MSF 7.00 file with five streams, stream 1 being the
    PDB information stream.

    Pages: 0 superblock, 1 free page map, 2 directory page list,
    3 information stream, 4 stream directory.
    """
    info = struct.pack("<III", 20000404, 0, age) + guid_raw + b"\0" * 64
    sizes = [0, len(info), 0, 0, 0]
    directory = struct.pack("<I", len(sizes)) + struct.pack("<5I", *sizes) + struct.pack("<I", 3)

    superblock = PDB7_SIGNATURE + struct.pack(
        "<IIIIII",
        PDB_PAGE_SIZE,
        1,
        5,
        len(directory),
        0,
        2,
    )
    pages = [
        superblock,
        b"",
        struct.pack("<I", 4),
        info,
        directory,
    ]

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"".join(p.ljust(PDB_PAGE_SIZE, b"\0") for p in pages))
    return path


class FakePdbReader:
    """Maps PDB paths to identities; anything else is not a PDB."""

    def __init__(self, identities: Optional[Dict[Path, PdbIdentity]] = None) -> None:
        self.identities = dict(identities or {})
        self.calls: List[Path] = []

    def __call__(self, path: Path) -> PdbIdentity:
        self.calls.append(Path(path))
        if not Path(path).is_file():
            raise FileNotFoundError(path)
        try:
            return self.identities[Path(path)]
        except KeyError:
            raise ValueError(f"not a PDB: {path}") from None


class RecordingIndex(ContentIndex):
    def __init__(self, result: Optional[Path] = None) -> None:
        self.result = result
        self.queries: List[bytes] = []

    def find_dsym(self, target_uuid: bytes) -> Optional[Path]:
        self.queries.append(target_uuid)
        return self.result


def pdb_identity(guid_raw: bytes, age: int) -> PdbIdentity:
    return PdbIdentity(age=age, guid=uuid.UUID(bytes_le=guid_raw))


@pytest.fixture
def index() -> RecordingIndex:
    return RecordingIndex()


@pytest.fixture
def debug_root(tmp_path: Path) -> Path:
    root = tmp_path / "usr-lib-debug"
    root.mkdir()
    return root


@pytest.fixture
def config(index: RecordingIndex, debug_root: Path) -> SearchConfig:
    return SearchConfig(debug_root=debug_root, content_index=index)


@pytest.fixture(autouse=True)
def _no_symbol_path(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("_NT_SYMBOL_PATH", raising=False)
    monkeypatch.delenv("_NT_ALT_SYMBOL_PATH", raising=False)
