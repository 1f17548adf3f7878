# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared parser infrastructure and helper utilities."""

from __future__ import annotations

import json
from collections.abc import Iterator, Mapping, Sequence
from typing import TypeAlias, cast

from ..errors import MalformedOutputError
from ..execution import ExecutionResult

JsonValue: TypeAlias = str | int | float | bool | None | list["JsonValue"] | dict[str, "JsonValue"]


def decode_text(result: ExecutionResult, tool: str) -> str:
    """Return stdout of ``result`` as text.

    Raises:
        MalformedOutputError: If stdout is not valid UTF-8.
    """

    try:
        return result.stdout_text
    except UnicodeDecodeError as exc:
        raise MalformedOutputError(tool, f"stdout is not UTF-8: {exc}") from exc


def load_json(text: str, tool: str) -> JsonValue:
    """Decode ``text`` as a single JSON document.

    Raises:
        MalformedOutputError: If ``text`` is empty or not JSON.
    """

    stripped = text.strip()
    if not stripped:
        raise MalformedOutputError(tool, "empty output")
    try:
        return cast(JsonValue, json.loads(stripped))
    except json.JSONDecodeError as exc:
        raise MalformedOutputError(tool, f"invalid JSON: {exc}") from exc


def iter_dicts(value: JsonValue) -> Iterator[Mapping[str, JsonValue]]:
    """Yield mapping items from ``value`` when it is a sequence of dict-like objects."""

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        for item in value:
            if isinstance(item, Mapping):
                yield item


def coerce_optional_str(value: JsonValue | None) -> str | None:
    """Return ``value`` as text, keeping ``None``."""

    if value is None or isinstance(value, str):
        return value
    return str(value)


def coerce_int(value: JsonValue | None, *, tool: str, label: str) -> int:
    """Return ``value`` as an integer.

    Raises:
        MalformedOutputError: If ``value`` is not an integer.
    """

    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedOutputError(tool, f"{label} must be an integer, got {value!r}")
    return value


__all__ = [
    "JsonValue",
    "coerce_int",
    "coerce_optional_str",
    "decode_text",
    "iter_dicts",
    "load_json",
]
