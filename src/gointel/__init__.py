# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Go code intelligence through external analysis tools."""

from __future__ import annotations

from .completion import CompletionOrchestrator, CompletionRequest
from .config import IntegrationConfig, load_config
from .errors import (
    ConfigError,
    GointelError,
    MalformedOutputError,
    RenameError,
    ToolExecutionError,
    ToolLaunchError,
)
from .execution import ExecutionBackend, ExecutionResult, FailureKind, ToolInvocation
from .session import GoToolSession

__all__ = [
    "CompletionOrchestrator",
    "CompletionRequest",
    "ConfigError",
    "ExecutionBackend",
    "ExecutionResult",
    "FailureKind",
    "GoToolSession",
    "GointelError",
    "IntegrationConfig",
    "MalformedOutputError",
    "RenameError",
    "ToolExecutionError",
    "ToolInvocation",
    "ToolLaunchError",
    "load_config",
]
