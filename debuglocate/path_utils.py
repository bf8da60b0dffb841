#!/usr/bin/env python3
"""
path_utils.py

Path helpers shared by the locators:
  - canonicalize(): absolute, symlink-free path of an existing file
  - path_from_bytes(): interpret a raw path from a binary header
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Union

from .errors import BadPath, PathEncodingError

PathLike = Union[str, bytes, "os.PathLike[str]"]

_POSIX = os.name == "posix"


def canonicalize(path: PathLike) -> Path:
    """
    Resolve `path` to its canonical absolute form.

    The file must exist. Any failure is raised as BadPath.
    """
    if isinstance(path, bytes):
        path = path_from_bytes(path)
    try:
        return Path(path).resolve(strict=True)
    except (OSError, RuntimeError) as e:
        raise BadPath(f"cannot canonicalize {os.fspath(path)!r}: {e}") from e


def path_from_bytes(raw: Union[bytes, str, "os.PathLike[str]"]) -> Path:
    """
    Convert a path recorded in a binary into a Path.

    On POSIX the bytes are taken as-is (os.fsdecode keeps undecodable
    bytes through surrogateescape). Elsewhere the bytes must be UTF-8.
    """
    if not isinstance(raw, bytes):
        return Path(raw)

    if _POSIX:
        return Path(os.fsdecode(raw))

    try:
        return Path(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise PathEncodingError(f"path {raw!r} is not valid UTF-8: {e}") from e


__all__ = [
    "PathLike",
    "canonicalize",
    "path_from_bytes",
]
