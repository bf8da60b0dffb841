#!/usr/bin/env python3
"""
content_index.py

Content-index capability used as the last resort for dSYM lookup.

On macOS, Spotlight indexes dSYM bundles and tags them with the UUIDs of
the Mach-O files they describe (attribute com_apple_xcode_dsym_uuids) and
with the bundle-relative paths of their DWARF files
(com_apple_xcode_dsym_paths). We query it through the mdfind / mdls
command-line tools.

Elsewhere there is no such service and NullContentIndex is used.
"""

from __future__ import annotations

import logging
import re
import subprocess
import sys
import uuid
from pathlib import Path
from typing import List, Optional


LOG = logging.getLogger("content_index")

DSYM_UUIDS_ATTR = "com_apple_xcode_dsym_uuids"
DSYM_PATHS_ATTR = "com_apple_xcode_dsym_paths"

# mdls -raw prints arrays as:  ( "a", "b" )  and missing values as (null)
_QUOTED_RE = re.compile(r'"((?:[^"\\]|\\.)*)"')


class ContentIndex:
    """Interface: find the DWARF file of a dSYM bundle by Mach-O UUID."""

    def find_dsym(self, target_uuid: bytes) -> Optional[Path]:
        raise NotImplementedError


class NullContentIndex(ContentIndex):
    """No content index on this platform; always "not found"."""

    def find_dsym(self, target_uuid: bytes) -> Optional[Path]:
        return None


def format_dsym_uuid(target_uuid: bytes) -> str:
    """Upper-case hyphenated form, as Spotlight stores it."""
    return str(uuid.UUID(bytes=target_uuid)).upper()


def parse_mdls_array(output: str) -> List[str]:
    if output.strip() == "(null)":
        return []
    return [m.group(1).replace('\\"', '"') for m in _QUOTED_RE.finditer(output)]


class SpotlightContentIndex(ContentIndex):
    def __init__(
        self,
        mdfind: str = "mdfind",
        mdls: str = "mdls",
        timeout: float = 30.0,
    ) -> None:
        self.mdfind = mdfind
        self.mdls = mdls
        self.timeout = timeout

    def _run(self, cmd: List[str]) -> Optional[str]:
        try:
            proc = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                text=True,
                check=False,
                timeout=self.timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            LOG.warning("%s failed: %s", cmd[0], e)
            return None

        if proc.returncode != 0:
            LOG.debug("%s exited with %d", cmd[0], proc.returncode)
            return None
        return proc.stdout

    def find_dsym(self, target_uuid: bytes) -> Optional[Path]:
        query = f"{DSYM_UUIDS_ATTR} == {format_dsym_uuid(target_uuid)}"
        out = self._run([self.mdfind, query])
        if not out:
            return None

        bundles = [line.strip() for line in out.splitlines() if line.strip()]
        if not bundles:
            return None
        bundle = Path(bundles[0])

        raw = self._run([self.mdls, "-name", DSYM_PATHS_ATTR, "-raw", str(bundle)])
        if raw is None:
            return None

        dwarf_paths = parse_mdls_array(raw)
        if not dwarf_paths:
            LOG.debug("No %s attribute on %s", DSYM_PATHS_ATTR, bundle)
            return None

        return bundle / dwarf_paths[0]


def default_content_index() -> ContentIndex:
    if sys.platform == "darwin":
        return SpotlightContentIndex()
    return NullContentIndex()


__all__ = [
    "ContentIndex",
    "NullContentIndex",
    "SpotlightContentIndex",
    "format_dsym_uuid",
    "parse_mdls_array",
    "default_content_index",
]
