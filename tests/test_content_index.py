"""Tests for the Spotlight content index."""

import subprocess
from pathlib import Path
from typing import List

import pytest
from conftest import UUID_A

from debuglocate import content_index
from debuglocate.content_index import (
    NullContentIndex,
    SpotlightContentIndex,
    default_content_index,
    format_dsym_uuid,
    parse_mdls_array,
)


class FakeRun:
    def __init__(self, outputs: List[subprocess.CompletedProcess]) -> None:
        self.outputs = list(outputs)
        self.commands: List[List[str]] = []

    def __call__(self, cmd, **kwargs):
        self.commands.append(cmd)
        return self.outputs.pop(0)


def _done(stdout: str, code: int = 0) -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=code, stdout=stdout)


def test_format_dsym_uuid() -> None:
    """Verify Spotlight's upper-case hyphenated UUID form."""
    assert format_dsym_uuid(UUID_A) == "00010203-0405-0607-0809-0A0B0C0D0E0F"


def test_parse_mdls_array() -> None:
    """Verify mdls -raw arrays and (null) are decoded."""
    raw = '(\n    "Contents/Resources/DWARF/app",\n    "Contents/Resources/DWARF/lib"\n)'
    assert parse_mdls_array(raw) == [
        "Contents/Resources/DWARF/app",
        "Contents/Resources/DWARF/lib",
    ]
    assert parse_mdls_array("(null)") == []


def test_spotlight_found(monkeypatch: pytest.MonkeyPatch) -> None:
    """Verify the first bundle and its first DWARF path are combined."""
    run = FakeRun(
        [
            _done("/Users/me/app.dSYM\n/Users/me/old/app.dSYM\n"),
            _done('(\n    "Contents/Resources/DWARF/app"\n)'),
        ]
    )
    monkeypatch.setattr(content_index.subprocess, "run", run)

    found = SpotlightContentIndex().find_dsym(UUID_A)
    assert found == Path("/Users/me/app.dSYM/Contents/Resources/DWARF/app")
    assert run.commands[0] == [
        "mdfind",
        "com_apple_xcode_dsym_uuids == 00010203-0405-0607-0809-0A0B0C0D0E0F",
    ]
    assert run.commands[1][-1] == "/Users/me/app.dSYM"


def test_spotlight_no_bundle(monkeypatch: pytest.MonkeyPatch) -> None:
    """Verify an empty query result is not found."""
    run = FakeRun([_done("")])
    monkeypatch.setattr(content_index.subprocess, "run", run)
    assert SpotlightContentIndex().find_dsym(UUID_A) is None
    assert len(run.commands) == 1


def test_spotlight_missing_attribute(monkeypatch: pytest.MonkeyPatch) -> None:
    """Verify a bundle without DWARF paths is not found."""
    run = FakeRun([_done("/x/app.dSYM\n"), _done("(null)")])
    monkeypatch.setattr(content_index.subprocess, "run", run)
    assert SpotlightContentIndex().find_dsym(UUID_A) is None


def test_spotlight_tool_failures(monkeypatch: pytest.MonkeyPatch) -> None:
    """Verify missing tools, timeouts and errors are folded into not found."""

    def missing(cmd, **kwargs):
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr(content_index.subprocess, "run", missing)
    assert SpotlightContentIndex().find_dsym(UUID_A) is None

    def slow(cmd, **kwargs):
        raise subprocess.TimeoutExpired(cmd, kwargs.get("timeout"))

    monkeypatch.setattr(content_index.subprocess, "run", slow)
    assert SpotlightContentIndex().find_dsym(UUID_A) is None

    monkeypatch.setattr(content_index.subprocess, "run", FakeRun([_done("junk", code=1)]))
    assert SpotlightContentIndex().find_dsym(UUID_A) is None


def test_default_content_index(monkeypatch: pytest.MonkeyPatch) -> None:
    """Verify Spotlight is only used on macOS."""
    monkeypatch.setattr(content_index.sys, "platform", "darwin")
    assert isinstance(default_content_index(), SpotlightContentIndex)
    monkeypatch.setattr(content_index.sys, "platform", "linux")
    assert isinstance(default_content_index(), NullContentIndex)
    assert NullContentIndex().find_dsym(UUID_A) is None
