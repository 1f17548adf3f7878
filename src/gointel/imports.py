# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Import statement insertion for Go buffers."""

from __future__ import annotations

from pathlib import Path

from .catalog import PackageCatalog
from .models import ImportKind, PackageInfo, Position, PreludeStructure, TextEdit
from .parsers import parse_prelude
from .workspace import offset_at


def compute_import_insertion(prelude: PreludeStructure, import_path: str) -> TextEdit | None:
    """Return the edit that adds ``import_path`` to a file with ``prelude``.

    Targets, in priority order: the closing line of the last grouped import
    block, the line after the last single import, a new grouped block after
    the package clause. Without a package clause and imports there is no
    safe place and ``None`` is returned.

    Args:
        prelude: Structure parsed from the current buffer.
        import_path: Package path to import.

    Returns:
        TextEdit | None: Insertion edit, or ``None`` when no insertion point exists.
    """

    closing_lines = [
        block.span.end
        for block in prelude.import_blocks
        if block.kind is ImportKind.MULTI and block.span.end is not None
    ]
    if closing_lines:
        close_line = closing_lines[-1]
        return TextEdit.insert(Position(close_line, 0), f'\t"{import_path}"\n')
    singles = [block.span.start for block in prelude.import_blocks if block.kind is ImportKind.SINGLE]
    if singles:
        return TextEdit.insert(Position(singles[-1] + 1, 0), f'import "{import_path}"\n')
    if prelude.package_clause is not None:
        return TextEdit.insert(
            Position(prelude.package_clause.start + 1, 0),
            f'\nimport (\n\t"{import_path}"\n)\n',
        )
    return None


def apply_text_edit(text: str, edit: TextEdit) -> str:
    """Return ``text`` with ``edit`` applied.

    Insertions past the last line are appended, starting a new line first
    when the buffer does not end with one.
    """

    start = offset_at(text, edit.range.start.line, edit.range.start.character)
    end = offset_at(text, edit.range.end.line, edit.range.end.character)
    new_text = edit.new_text
    if start == len(text) and text and not text.endswith("\n") and edit.range.start.line >= text.count("\n") + 1:
        new_text = "\n" + new_text
    return text[:start] + new_text + text[end:]


class ImportService:
    """Add imports to buffers and list import candidates."""

    def __init__(self, catalog: PackageCatalog) -> None:
        self._catalog = catalog

    def edit_for(self, text: str, import_path: str) -> TextEdit | None:
        """Return the edit importing ``import_path`` into ``text``."""

        return compute_import_insertion(parse_prelude(text), import_path)

    def add_import(self, text: str, import_path: str) -> str | None:
        """Return ``text`` with ``import_path`` imported, or ``None`` when impossible."""

        edit = self.edit_for(text, import_path)
        if edit is None:
            return None
        return apply_text_edit(text, edit)

    def importable_packages(self, current_file: Path | str) -> list[PackageInfo]:
        """Return packages ``current_file`` could import but does not yet."""

        return self._catalog.list_packages(exclude_imported=True, current_file=current_file)


__all__ = ["ImportService", "apply_text_edit", "compute_import_insertion"]
