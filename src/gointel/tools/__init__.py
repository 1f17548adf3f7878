# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tool registry, resolution and invocation helpers."""

from __future__ import annotations

from .provisioning import ConsoleToolProvisioner, ToolProvisioner
from .registry import TOOL_IMPORT_PATHS, ContainerToolResolver, GoTool, LocalToolResolver, ToolResolver
from .runner import ToolRunner

__all__ = [
    "ConsoleToolProvisioner",
    "ContainerToolResolver",
    "GoTool",
    "LocalToolResolver",
    "TOOL_IMPORT_PATHS",
    "ToolProvisioner",
    "ToolResolver",
    "ToolRunner",
]
