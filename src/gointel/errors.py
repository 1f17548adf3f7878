# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared across the gointel package."""

from __future__ import annotations


class GointelError(Exception):
    """Base class for every error raised by gointel."""


class ConfigError(GointelError):
    """Raised when configuration input is invalid."""


class MalformedOutputError(GointelError):
    """Raised when a tool produced output that cannot be decoded."""

    def __init__(self, tool: str, message: str) -> None:
        """Initialise the error with the offending tool name.

        Args:
            tool: Logical name of the tool whose output was rejected.
            message: Human readable description of the decoding problem.
        """

        super().__init__(f"{tool}: {message}")
        self.tool = tool


class StreamFramingError(GointelError):
    """Raised when a multiplexed container stream ends mid-frame."""


class ToolLaunchError(GointelError):
    """Raised when a tool process or exec session could not be started."""

    def __init__(self, tool: str, message: str) -> None:
        super().__init__(f"Failed to launch '{tool}': {message}")
        self.tool = tool


class ToolExecutionError(GointelError):
    """Raised when a tool ran but reported a failure."""

    def __init__(self, tool: str, message: str, *, stderr: str = "") -> None:
        """Initialise the error with captured diagnostics.

        Args:
            tool: Logical name of the failing tool.
            message: Summary of the failure.
            stderr: Standard error captured from the tool.
        """

        super().__init__(message)
        self.tool = tool
        self.stderr = stderr


class RenameError(ToolExecutionError):
    """Raised when ``gorename`` rejects a rename request."""


__all__ = [
    "ConfigError",
    "GointelError",
    "MalformedOutputError",
    "RenameError",
    "StreamFramingError",
    "ToolExecutionError",
    "ToolLaunchError",
]
