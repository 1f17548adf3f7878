# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Single pass scanner for the package clause and import declarations."""

from __future__ import annotations

import re
from typing import Final

from ..models import ImportBlock, ImportKind, LineSpan, PreludeStructure

_PACKAGE_LINE: Final[re.Pattern[str]] = re.compile(r"^\s*package\s+")
_MULTI_IMPORT_LINE: Final[re.Pattern[str]] = re.compile(r"^\s*import\s+\(")
_SINGLE_IMPORT_LINE: Final[re.Pattern[str]] = re.compile(r"^\s*import\s+[^(]")
_CLOSE_PAREN_LINE: Final[re.Pattern[str]] = re.compile(r"^\s*\)")
_DECLARATION_LINE: Final[re.Pattern[str]] = re.compile(r"^\s*(func|const|type|var)")


def parse_prelude(text: str) -> PreludeStructure:
    """Locate the package clause and import declarations of a Go file.

    Scanning stops at the first top-level ``func``, ``const``, ``type`` or
    ``var`` line. Lines inside an open multi block are import specs, so only
    a line starting with ``)`` is examined there; it closes the block.
    Line numbers are zero-based.

    Args:
        text: Full buffer contents.

    Returns:
        PreludeStructure: Package clause span and import blocks in source order.
    """

    package_clause: LineSpan | None = None
    blocks: list[ImportBlock] = []
    for index, line in enumerate(text.split("\n")):
        if blocks and blocks[-1].span.end is None:
            if _CLOSE_PAREN_LINE.match(line):
                last = blocks[-1]
                blocks[-1] = ImportBlock(last.kind, LineSpan(last.span.start, index))
            continue
        if _PACKAGE_LINE.match(line):
            package_clause = LineSpan(index, index)
        if _MULTI_IMPORT_LINE.match(line):
            blocks.append(ImportBlock(ImportKind.MULTI, LineSpan(index, None)))
        elif _SINGLE_IMPORT_LINE.match(line):
            blocks.append(ImportBlock(ImportKind.SINGLE, LineSpan(index, index)))
        elif _DECLARATION_LINE.match(line):
            break
    return PreludeStructure(package_clause=package_clause, import_blocks=tuple(blocks))


__all__ = ["parse_prelude"]
