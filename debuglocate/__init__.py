"""
debuglocate: find the separate debug-info file of a compiled binary.

    from debuglocate import locate_debug_symbols
    path = locate_debug_symbols("/usr/bin/foo")   # Path or None
"""

from .config import SearchConfig
from .descriptors import BuildId, DebugDescriptor, GnuDebugLink, MachOUuid, PdbInfo
from .errors import BadPath, DebugLocateError, InspectError, PathEncodingError, TooShort
from .locator import locate, locate_debug_symbols

__version__ = "0.3.0"

__all__ = [
    "SearchConfig",
    "BuildId",
    "DebugDescriptor",
    "GnuDebugLink",
    "MachOUuid",
    "PdbInfo",
    "BadPath",
    "DebugLocateError",
    "InspectError",
    "PathEncodingError",
    "TooShort",
    "locate",
    "locate_debug_symbols",
]
