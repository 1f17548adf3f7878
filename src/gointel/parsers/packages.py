# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parser for the newline separated ``gopkgs`` listing."""

from __future__ import annotations


def parse_package_list(text: str) -> list[str]:
    """Split ``gopkgs`` output into sorted package paths.

    Only the single empty entry produced by the terminating newline is
    dropped; other empty entries are kept.

    Args:
        text: Raw stdout of ``gopkgs``.

    Returns:
        list[str]: Lexicographically sorted package paths.
    """

    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return sorted(lines)


__all__ = ["parse_package_list"]
