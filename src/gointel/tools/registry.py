# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Logical tool names and executable resolution."""

from __future__ import annotations

import logging
import os
import shutil
from abc import ABC, abstractmethod
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from threading import Lock
from typing import Final

from ..workspace import workspace_roots

LOGGER = logging.getLogger(__name__)


class GoTool(str, Enum):
    """External tools the integration layer invokes."""

    OUTLINE = "go-outline"
    RENAME = "gorename"
    PACKAGES = "gopkgs"
    COMPLETION = "gocode"
    GO = "go"

    @property
    def import_path(self) -> str | None:
        """Return the ``go get`` import path used to install the tool."""

        return TOOL_IMPORT_PATHS.get(self)


TOOL_IMPORT_PATHS: Final[Mapping[GoTool, str]] = {
    GoTool.OUTLINE: "github.com/lukehoban/go-outline",
    GoTool.RENAME: "golang.org/x/tools/cmd/gorename",
    GoTool.PACKAGES: "github.com/tpng/gopkgs",
    GoTool.COMPLETION: "github.com/nsf/gocode",
}


class ToolResolver(ABC):
    """Map a logical tool to the executable handed to the backend."""

    @abstractmethod
    def resolve(self, tool: GoTool) -> str:
        """Return the executable path or name for ``tool``."""


class ContainerToolResolver(ToolResolver):
    """Resolve tools by bare name; lookup happens inside the container."""

    def resolve(self, tool: GoTool) -> str:
        return tool.value


class LocalToolResolver(ToolResolver):
    """Search configured overrides, GOPATH, GOROOT and PATH for a tool.

    Lookups are memoized per tool. When nothing is found the bare tool name is
    returned so the backend reports the executable as missing.
    """

    def __init__(
        self,
        *,
        overrides: Mapping[str, Path] | None = None,
        gopath: str = "",
        goroot: str | None = None,
        search_path: str | None = None,
    ) -> None:
        self._overrides = dict(overrides or {})
        self._gopath = gopath
        self._goroot = goroot
        self._search_path = search_path
        self._cache: dict[GoTool, str] = {}
        self._lock = Lock()

    def resolve(self, tool: GoTool) -> str:
        """Return the executable location for ``tool``.

        Args:
            tool: Logical tool to resolve.

        Returns:
            str: Absolute path when found, otherwise the bare tool name.
        """

        with self._lock:
            cached = self._cache.get(tool)
        if cached is not None:
            return cached
        resolved = self._lookup(tool)
        if resolved is None:
            LOGGER.debug("%s not found in GOPATH, GOROOT or PATH", tool.value)
            return tool.value
        with self._lock:
            self._cache[tool] = resolved
        return resolved

    def clear(self) -> None:
        """Forget memoized lookups, e.g. after a tool was installed."""

        with self._lock:
            self._cache.clear()

    def _lookup(self, tool: GoTool) -> str | None:
        override = self._overrides.get(tool.value)
        if override is not None and override.is_file():
            return str(override)
        binary = _binary_name(tool.value)
        candidates = [Path(root) / "bin" / binary for root in workspace_roots(self._gopath)]
        if self._goroot:
            candidates.append(Path(self._goroot) / "bin" / binary)
        for candidate in candidates:
            if candidate.is_file() and os.access(candidate, os.X_OK):
                return str(candidate)
        return shutil.which(binary, path=self._search_path)


def _binary_name(name: str) -> str:
    return f"{name}.exe" if os.name == "nt" else name


__all__ = [
    "ContainerToolResolver",
    "GoTool",
    "LocalToolResolver",
    "TOOL_IMPORT_PATHS",
    "ToolResolver",
]
