# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Notifications routed to whoever installs missing tools."""

from __future__ import annotations

from threading import Lock
from typing import Protocol

from ..logging import warn
from .registry import GoTool


class ToolProvisioner(Protocol):
    """Collaborator told about tools that could not be located."""

    def prompt_for_missing_tool(self, tool: GoTool, *, in_container: bool) -> None:
        """Handle a missing ``tool``; must not raise."""


class ConsoleToolProvisioner:
    """Print an install hint once per missing tool."""

    def __init__(self, *, use_emoji: bool = True, use_color: bool | None = None) -> None:
        self._use_emoji = use_emoji
        self._use_color = use_color
        self._reported: set[GoTool] = set()
        self._lock = Lock()

    def prompt_for_missing_tool(self, tool: GoTool, *, in_container: bool) -> None:
        """Warn that ``tool`` is missing and show how to install it.

        Args:
            tool: Tool that could not be located.
            in_container: Whether the lookup happened inside the tool container.
        """

        with self._lock:
            if tool in self._reported:
                return
            self._reported.add(tool)
        where = "in the tool container" if in_container else "on this machine"
        hint = f" Install it with: go get -u {tool.import_path}" if tool.import_path else ""
        warn(f"The '{tool.value}' command is not available {where}.{hint}", use_emoji=self._use_emoji, use_color=self._use_color)


__all__ = ["ConsoleToolProvisioner", "ToolProvisioner"]
