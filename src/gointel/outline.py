# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Document outline backed by ``go-outline``."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Final

from .errors import ToolLaunchError
from .execution import FailureKind
from .models import DeclKind, SymbolDeclaration, SymbolInformation, SymbolKind
from .parsers import parse_outline
from .tools import GoTool, ToolRunner

DECL_SYMBOL_KINDS: Final[Mapping[DeclKind, SymbolKind]] = {
    DeclKind.PACKAGE: SymbolKind.PACKAGE,
    DeclKind.IMPORT: SymbolKind.NAMESPACE,
    DeclKind.VARIABLE: SymbolKind.VARIABLE,
    DeclKind.TYPE: SymbolKind.INTERFACE,
    DeclKind.FUNCTION: SymbolKind.FUNCTION,
}


class OutlineService:
    """Produce declaration trees and symbol lists for Go files."""

    def __init__(self, runner: ToolRunner) -> None:
        self._runner = runner

    def document_symbols(self, filename: Path | str) -> SymbolDeclaration | None:
        """Return the declaration tree of ``filename``.

        Args:
            filename: Host path of the file on disk.

        Returns:
            SymbolDeclaration | None: Root declaration, or ``None`` when the tool is
            missing, fails, or prints something undecodable.

        Raises:
            ToolLaunchError: If the backend could not start the tool.
        """

        mapped = self._runner.backend.map_path(filename)
        result = self._runner.run(GoTool.OUTLINE, ["-f", mapped])
        if result.failure is not None and result.failure.kind is FailureKind.LAUNCH_FAILED:
            raise ToolLaunchError(GoTool.OUTLINE.value, result.failure.message)
        return parse_outline(result)

    def imported_packages(self, filename: Path | str) -> list[str]:
        """Return the import paths declared by ``filename``."""

        root = self.document_symbols(filename)
        if root is None:
            return []
        return [child.label[1:-1] for child in root.children if child.kind is DeclKind.IMPORT]

    def symbol_information(self, filename: Path | str) -> list[SymbolInformation]:
        """Return the flattened symbols of ``filename``."""

        root = self.document_symbols(filename)
        return flatten_symbols(root) if root is not None else []


def flatten_symbols(root: SymbolDeclaration) -> list[SymbolInformation]:
    """Flatten ``root`` into a pre-order symbol list.

    Methods are labelled ``(<receiver>).<name>``; children record their
    parent's label as container name.
    """

    symbols: list[SymbolInformation] = []
    _collect([root], symbols, container="")
    return symbols


def _collect(decls: tuple[SymbolDeclaration, ...] | list[SymbolDeclaration], out: list[SymbolInformation], *, container: str) -> None:
    for decl in decls:
        label = f"({decl.receiver_type}).{decl.label}" if decl.receiver_type else decl.label
        out.append(
            SymbolInformation(
                name=label,
                kind=DECL_SYMBOL_KINDS[decl.kind],
                start=decl.byte_range.start,
                end=decl.byte_range.end - 1,
                container_name=container,
            )
        )
        _collect(decl.children, out, container=decl.label)


__all__ = ["DECL_SYMBOL_KINDS", "OutlineService", "flatten_symbols"]
