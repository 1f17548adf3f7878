# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Identifier renaming through ``gorename``."""

from __future__ import annotations

import logging

from .errors import RenameError, ToolLaunchError
from .execution import FailureKind
from .tools import GoTool, ToolRunner
from .workspace import byte_offset_at, line_at, word_range_at

LOGGER = logging.getLogger(__name__)


class RenameService:
    """Run ``gorename`` for the identifier under the cursor.

    ``gorename`` rewrites the affected files on disk itself, so only success
    or failure is reported; callers must save buffers beforehand and reload
    them afterwards.
    """

    def __init__(self, runner: ToolRunner, *, build_tags: str = "") -> None:
        self._runner = runner
        self._build_tags = build_tags

    def rename(self, filename: str, text: str, line: int, character: int, new_name: str) -> bool:
        """Rename the identifier at ``(line, character)`` to ``new_name``.

        Args:
            filename: Host path of the saved file.
            text: Buffer contents matching the file on disk.
            line: Zero-based cursor line.
            character: Zero-based cursor column.
            new_name: Replacement identifier.

        Returns:
            bool: ``True`` when the rename was applied, ``False`` when gorename is missing.

        Raises:
            RenameError: If gorename rejected the rename; carries its stderr.
            ToolLaunchError: If gorename could not be started.
        """

        word_range = word_range_at(line_at(text, line), character)
        start = word_range[0] if word_range is not None else character
        offset = byte_offset_at(text, line, start)
        target = f"{self._runner.backend.map_path(filename)}:#{offset}"
        result = self._runner.run(
            GoTool.RENAME,
            ["-offset", target, "-to", new_name, "-tags", f'"{self._build_tags}"'],
        )
        failure = result.failure
        if failure is None:
            LOGGER.info("Renamed identifier at %s to %s", target, new_name)
            return True
        if failure.kind is FailureKind.NOT_FOUND:
            return False
        if failure.kind is FailureKind.LAUNCH_FAILED:
            raise ToolLaunchError(GoTool.RENAME.value, failure.message)
        stderr = failure.stderr_text
        raise RenameError(GoTool.RENAME.value, f"Cannot rename due to errors: {stderr}", stderr=stderr)


__all__ = ["RenameService"]
