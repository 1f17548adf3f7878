# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parser for ``gocode -f=json autocomplete`` output."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Final

from ..errors import MalformedOutputError
from ..models import CompletionKind, CompletionSuggestion, Position, Range, TextEdit
from .base import JsonValue, coerce_int, coerce_optional_str, iter_dicts, load_json

TOOL: Final[str] = "gocode"
IMPORT_CLASS: Final[str] = "import"
FUNC_CLASS: Final[str] = "func"
_FUNC_PREFIX: Final[str] = "func"
_PACKAGE_CLAUSE: Final[re.Pattern[str]] = re.compile(r"package\s+(\w+)")

GOCODE_CLASS_KINDS: Final[Mapping[str, CompletionKind]] = {
    "const": CompletionKind.KEYWORD,
    "package": CompletionKind.KEYWORD,
    "type": CompletionKind.KEYWORD,
    "func": CompletionKind.FUNCTION,
    "var": CompletionKind.FIELD,
    "import": CompletionKind.MODULE,
}


@dataclass(frozen=True, slots=True)
class CompletionContext:
    """Request details the parser needs to shape suggestions."""

    filename: str
    text: str
    position: Position
    line_text: str
    in_string: bool = False
    use_function_snippets: bool = False


def kind_for_class(category: str | None) -> CompletionKind:
    """Map a gocode ``class`` tag to a completion kind; unknown tags fall back to property."""

    if category is None:
        return CompletionKind.PROPERTY
    return GOCODE_CLASS_KINDS.get(category, CompletionKind.PROPERTY)


def split_parameters(signature: str) -> list[str] | None:
    """Split a parenthesised parameter list into its top-level entries.

    Args:
        signature: Text starting with ``(``, e.g. ``(a int, b func(x, y int)) error``.

    Returns:
        list[str] | None: Parameter declarations, or ``None`` when the list is unbalanced.
    """

    params: list[str] = []
    depth = 0
    last_start = 1
    for index in range(1, len(signature)):
        char = signature[index]
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                if index > last_start:
                    params.append(signature[last_start:index])
                return params
        elif char == "," and depth == 0:
            params.append(signature[last_start:index])
            last_start = index + 2
    return None


def function_snippet(name: str, signature: str) -> str:
    """Return an insert text with one placeholder per parameter of ``signature``."""

    params = split_parameters(signature[len(_FUNC_PREFIX) :]) or []
    placeholders = []
    for raw in params:
        param = raw.strip()
        if param:
            param = param.replace("{", "\\{").replace("}", "\\}")
            placeholders.append("{{" + param + "}}")
    return f"{name}({', '.join(placeholders)}) {{{{}}}}"


def package_clause_suggestion(filename: str) -> CompletionSuggestion:
    """Return the ``package <name>`` snippet offered in files without a clause."""

    default = "main" if os.path.basename(filename) == "main.go" else os.path.basename(os.path.dirname(filename))
    return CompletionSuggestion(
        display_name=f"package {default}",
        kind=CompletionKind.SNIPPET,
        insert_text=f"package {default}\n\n",
    )


def _string_replacement(context: CompletionContext, name: str) -> TextEdit:
    before_cursor = context.line_text[: context.position.character]
    start = Position(context.position.line, before_cursor.rfind('"') + 1)
    return TextEdit(range=Range(start, context.position), new_text=name)


def _entries(payload: JsonValue) -> list[Mapping[str, JsonValue]]:
    if not isinstance(payload, list) or len(payload) != 2:
        raise MalformedOutputError(TOOL, "expected a [prefixLength, suggestions] pair")
    coerce_int(payload[0], tool=TOOL, label="prefix length")
    suggestions = payload[1]
    if suggestions is None:
        return []
    if not isinstance(suggestions, list):
        raise MalformedOutputError(TOOL, "suggestions must be a list")
    return list(iter_dicts(suggestions))


def parse_completion(text: str, *, context: CompletionContext) -> list[CompletionSuggestion]:
    """Convert gocode JSON output into completion suggestions.

    gocode prints ``[]`` when it has nothing to offer; that is treated as an
    empty result rather than a malformed payload.

    Args:
        text: Raw stdout of gocode.
        context: Cursor and buffer details of the request.

    Returns:
        list[CompletionSuggestion]: Suggestions in gocode order.

    Raises:
        MalformedOutputError: If ``text`` does not decode to the expected pair.
    """

    payload = load_json(text, TOOL)
    entries = [] if payload == [] else _entries(payload)

    suggestions: list[CompletionSuggestion] = []
    if not context.in_string and not _PACKAGE_CLAUSE.search(context.text):
        suggestions.append(package_clause_suggestion(context.filename))

    for entry in entries:
        category = coerce_optional_str(entry.get("class"))
        if context.in_string and category != IMPORT_CLASS:
            continue
        name = coerce_optional_str(entry.get("name")) or ""
        detail = coerce_optional_str(entry.get("type")) or ""
        item = CompletionSuggestion(display_name=name, kind=kind_for_class(category), detail=detail)
        if context.in_string:
            item.text_edit = _string_replacement(context, name)
        if context.use_function_snippets and category == FUNC_CLASS:
            item.insert_text = function_snippet(name, detail)
        suggestions.append(item)
    return suggestions


__all__ = [
    "CompletionContext",
    "GOCODE_CLASS_KINDS",
    "function_snippet",
    "kind_for_class",
    "package_clause_suggestion",
    "parse_completion",
    "split_parameters",
]
