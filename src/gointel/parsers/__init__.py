# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Public parser exports for converting tool output into domain objects."""

from __future__ import annotations

from .completion import CompletionContext, kind_for_class, parse_completion, split_parameters
from .outline import decode_outline, parse_outline
from .packages import parse_package_list
from .prelude import parse_prelude

__all__ = [
    "CompletionContext",
    "decode_outline",
    "kind_for_class",
    "parse_completion",
    "parse_outline",
    "parse_package_list",
    "parse_prelude",
    "split_parameters",
]
