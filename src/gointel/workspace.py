# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""GOPATH workspace resolution and buffer position helpers."""

from __future__ import annotations

import os
import re
import sys
from pathlib import Path, PurePath
from typing import Final

VENDOR_SEGMENT: Final[str] = "/vendor/"
_WORD_PATTERN: Final[re.Pattern[str]] = re.compile(r"\w+")


def workspace_roots(gopath: str) -> list[str]:
    """Split a GOPATH style value into its non-empty entries."""

    return [entry for entry in gopath.split(os.pathsep) if entry]


def canonicalize_dir(path: str) -> str:
    """Upper-case a Windows drive letter so prefix checks are stable."""

    if sys.platform == "win32" and len(path) > 1 and path[1] == ":":
        return path[0].upper() + path[1:]
    return path


def _contains(parent: str, child: str) -> bool:
    try:
        PurePath(child).relative_to(PurePath(parent))
    except ValueError:
        return False
    return True


def current_workspace(roots: list[str], file_dir: str) -> str | None:
    """Return the ``src`` directory of the workspace holding ``file_dir``.

    When several roots contain the directory (nested workspaces) the longest,
    most specific one wins. Without any match the first root is used.

    Args:
        roots: GOPATH entries in declaration order.
        file_dir: Directory of the file being edited.

    Returns:
        str | None: ``<root>/src`` of the selected workspace, ``None`` without roots.
    """

    if not roots:
        return None
    selected = os.path.join(roots[0], "src")
    best_length = -1
    for root in roots:
        candidate = os.path.join(root, "src")
        if _contains(candidate, file_dir) and len(candidate) > best_length:
            selected = candidate
            best_length = len(candidate)
    return selected


def rewrite_vendor_path(package: str, workspace: str | None, file_dir: str) -> str:
    """Return the import path usable from ``file_dir`` for ``package``.

    Only the first ``/vendor/`` segment is considered. The package is
    rewritten to its path below ``vendor`` when the file being edited lives in
    the same root project as the vendor directory; otherwise it is returned
    unchanged.

    Args:
        package: Full package path as listed by ``gopkgs``.
        workspace: ``src`` directory of the current workspace.
        file_dir: Directory of the file being edited.

    Returns:
        str: Rewritten or original package path.
    """

    vendor_index = package.find(VENDOR_SEGMENT)
    if vendor_index <= 0 or workspace is None:
        return package
    root_project = os.path.join(workspace, package[:vendor_index])
    relative = package[vendor_index + len(VENDOR_SEGMENT) :]
    if relative and _contains(root_project, file_dir):
        return relative
    return package


def split_lines(text: str) -> list[str]:
    """Split ``text`` on ``\\n`` keeping a trailing empty line."""

    return text.split("\n")


def line_at(text: str, line: int) -> str:
    """Return line ``line`` of ``text`` without its terminator."""

    lines = split_lines(text)
    if line < 0 or line >= len(lines):
        raise IndexError(f"line {line} is outside the buffer ({len(lines)} lines)")
    return lines[line].rstrip("\r")


def offset_at(text: str, line: int, character: int) -> int:
    """Return the character offset of ``(line, character)`` in ``text``.

    Positions past the end of a line clamp to the line end.
    """

    lines = split_lines(text)
    if line >= len(lines):
        return len(text)
    offset = sum(len(entry) + 1 for entry in lines[:line])
    return offset + min(character, len(lines[line]))


def byte_offset_at(text: str, line: int, character: int) -> int:
    """Return the UTF-8 byte offset of ``(line, character)`` in ``text``."""

    return len(text[: offset_at(text, line, character)].encode("utf-8"))


def word_range_at(line_text: str, character: int) -> tuple[int, int] | None:
    """Return the ``[start, end)`` columns of the word touching ``character``."""

    for match in _WORD_PATTERN.finditer(line_text):
        if match.start() <= character <= match.end():
            return match.start(), match.end()
    return None


def current_word(line_text: str, character: int) -> str:
    """Return the part of the word under the cursor that precedes it."""

    word_range = word_range_at(line_text, character)
    if word_range is None or word_range[0] >= character:
        return ""
    return line_text[word_range[0] : character]


def file_dir(filename: str | Path) -> str:
    """Return the canonical directory of ``filename``."""

    return canonicalize_dir(os.path.dirname(str(filename)))


__all__ = [
    "VENDOR_SEGMENT",
    "byte_offset_at",
    "canonicalize_dir",
    "current_word",
    "current_workspace",
    "file_dir",
    "line_at",
    "offset_at",
    "rewrite_vendor_path",
    "split_lines",
    "word_range_at",
]
