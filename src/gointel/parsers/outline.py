# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parser for the ``go-outline`` JSON declaration tree."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Final

from ..errors import MalformedOutputError
from ..execution import ExecutionResult
from ..models import ByteRange, DeclKind, SymbolDeclaration
from .base import JsonValue, coerce_int, coerce_optional_str, decode_text, iter_dicts, load_json

LOGGER = logging.getLogger(__name__)

TOOL: Final[str] = "go-outline"


def _range(value: JsonValue | None, label: str) -> ByteRange | None:
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise MalformedOutputError(TOOL, f"{label} must be an object")
    return ByteRange(
        start=coerce_int(value.get("start"), tool=TOOL, label=f"{label}.start"),
        end=coerce_int(value.get("end"), tool=TOOL, label=f"{label}.end"),
    )


def _declaration(entry: Mapping[str, JsonValue]) -> SymbolDeclaration:
    label = entry.get("label")
    if not isinstance(label, str):
        raise MalformedOutputError(TOOL, "declaration without a label")
    try:
        kind = DeclKind(entry.get("type"))
    except ValueError as exc:
        raise MalformedOutputError(TOOL, f"unknown declaration type {entry.get('type')!r}") from exc
    receiver = coerce_optional_str(entry.get("receiverType")) or None
    return SymbolDeclaration(
        label=label,
        kind=kind,
        byte_range=ByteRange(
            start=coerce_int(entry.get("start"), tool=TOOL, label="start"),
            end=coerce_int(entry.get("end"), tool=TOOL, label="end"),
        ),
        receiver_type=receiver,
        children=tuple(_declaration(child) for child in iter_dicts(entry.get("children") or [])),
        signature_range=_range(entry.get("signature"), "signature"),
        comment_range=_range(entry.get("comment"), "comment"),
    )


def decode_outline(text: str) -> SymbolDeclaration | None:
    """Decode ``go-outline`` JSON into a single rooted tree.

    ``go-outline`` emits a list whose only entry is the file's package
    declaration. Several top-level entries are wrapped in a synthetic
    package node spanning them; an empty list yields ``None``.

    Args:
        text: Raw JSON text.

    Returns:
        SymbolDeclaration | None: Root of the declaration tree.

    Raises:
        MalformedOutputError: If the payload does not match the expected shape.
    """

    payload = load_json(text, TOOL)
    if not isinstance(payload, list):
        raise MalformedOutputError(TOOL, "expected a list of declarations")
    roots = [_declaration(entry) for entry in iter_dicts(payload)]
    if not roots:
        return None
    if len(roots) == 1:
        return roots[0]
    return SymbolDeclaration(
        label="",
        kind=DeclKind.PACKAGE,
        byte_range=ByteRange(
            start=min(root.byte_range.start for root in roots),
            end=max(root.byte_range.end for root in roots),
        ),
        children=tuple(roots),
    )


def parse_outline(result: ExecutionResult) -> SymbolDeclaration | None:
    """Return the outline tree for ``result`` or ``None`` when unavailable.

    Failed invocations and undecodable payloads both yield ``None`` so that
    navigation features degrade to "no symbols".
    """

    if not result.ok:
        return None
    try:
        return decode_outline(decode_text(result, TOOL))
    except MalformedOutputError as exc:
        LOGGER.warning("Discarding go-outline output: %s", exc)
        return None


__all__ = ["decode_outline", "parse_outline"]
