# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Normalized domain objects produced from tool output."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class DeclKind(str, Enum):
    """Declaration categories reported by ``go-outline``."""

    PACKAGE = "package"
    IMPORT = "import"
    VARIABLE = "variable"
    TYPE = "type"
    FUNCTION = "function"


class SymbolKind(str, Enum):
    """Editor symbol categories for flattened outline entries."""

    PACKAGE = "package"
    NAMESPACE = "namespace"
    VARIABLE = "variable"
    INTERFACE = "interface"
    FUNCTION = "function"


class CompletionKind(str, Enum):
    """Normalized completion item categories."""

    KEYWORD = "keyword"
    FUNCTION = "function"
    FIELD = "field"
    MODULE = "module"
    PROPERTY = "property"
    SNIPPET = "snippet"


@dataclass(frozen=True, slots=True)
class ByteRange:
    """Half-open byte range inside a source file."""

    start: int
    end: int


@dataclass(frozen=True, slots=True)
class SymbolDeclaration:
    """Node of the outline tree; ``children`` follow source order."""

    label: str
    kind: DeclKind
    byte_range: ByteRange
    receiver_type: str | None = None
    children: tuple[SymbolDeclaration, ...] = ()
    signature_range: ByteRange | None = None
    comment_range: ByteRange | None = None


@dataclass(frozen=True, slots=True)
class SymbolInformation:
    """Flattened outline entry handed to the editor."""

    name: str
    kind: SymbolKind
    start: int
    end: int
    container_name: str


@dataclass(frozen=True, slots=True)
class PackageInfo:
    """Importable package; identity is the full ``path``."""

    name: str
    path: str

    @classmethod
    def from_path(cls, path: str) -> PackageInfo:
        """Derive the short name from the last path segment of ``path``."""

        return cls(name=path.rsplit("/", 1)[-1], path=path)


@dataclass(frozen=True, slots=True)
class LineSpan:
    """Zero-based inclusive line span; ``end`` is ``None`` while unterminated."""

    start: int
    end: int | None


class ImportKind(str, Enum):
    """Shape of an import declaration."""

    SINGLE = "single"
    MULTI = "multi"


@dataclass(frozen=True, slots=True)
class ImportBlock:
    """Import declaration located in the file prelude."""

    kind: ImportKind
    span: LineSpan


@dataclass(frozen=True, slots=True)
class PreludeStructure:
    """Package clause and import declarations found before the first decl."""

    package_clause: LineSpan | None = None
    import_blocks: tuple[ImportBlock, ...] = ()


@dataclass(frozen=True, slots=True, order=True)
class Position:
    """Zero-based line/character position."""

    line: int
    character: int


@dataclass(frozen=True, slots=True)
class Range:
    """Range between two positions."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class TextEdit:
    """Replace ``range`` with ``new_text``; an empty range is an insertion."""

    range: Range
    new_text: str

    @classmethod
    def insert(cls, position: Position, text: str) -> TextEdit:
        """Return an insertion of ``text`` at ``position``."""

        return cls(range=Range(position, position), new_text=text)


@dataclass(frozen=True, slots=True)
class EditorCommand:
    """Command the editor should run when a suggestion is accepted."""

    title: str
    command: str
    arguments: tuple[str, ...] = ()


@dataclass(slots=True)
class CompletionSuggestion:
    """Normalized completion item."""

    display_name: str
    kind: CompletionKind
    detail: str = ""
    insert_text: str | None = None
    text_edit: TextEdit | None = None
    associated_edits: list[TextEdit] = field(default_factory=list)
    documentation: str | None = None
    command: EditorCommand | None = None


__all__ = [
    "ByteRange",
    "CompletionKind",
    "CompletionSuggestion",
    "DeclKind",
    "EditorCommand",
    "ImportBlock",
    "ImportKind",
    "LineSpan",
    "PackageInfo",
    "Position",
    "PreludeStructure",
    "Range",
    "SymbolDeclaration",
    "SymbolInformation",
    "SymbolKind",
    "TextEdit",
]
