#!/usr/bin/env python3
"""
errors.py

Exceptions raised by debuglocate.

Only failures that stop a search from proceeding are raised. Problems with
an individual candidate file are never raised; they make that candidate a
non-match.
"""

from __future__ import annotations


class DebugLocateError(Exception):
    """Base class for all debuglocate errors."""


class BadPath(DebugLocateError):
    """The original binary path cannot be canonicalized or has no parent."""


class TooShort(DebugLocateError):
    """A build-id has fewer than 2 bytes."""


class PathEncodingError(DebugLocateError):
    """A byte-string path is not valid platform path text."""


class InspectError(DebugLocateError):
    """A binary was recognised but its headers could not be parsed."""


__all__ = [
    "DebugLocateError",
    "BadPath",
    "TooShort",
    "PathEncodingError",
    "InspectError",
]
