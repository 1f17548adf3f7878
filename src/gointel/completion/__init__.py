# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Completion orchestration built on gocode."""

from __future__ import annotations

from .daemon import DaemonConfigurator
from .orchestrator import IMPORT_COMMAND, CompletionOrchestrator, CompletionRequest, inside_string

__all__ = [
    "CompletionOrchestrator",
    "CompletionRequest",
    "DaemonConfigurator",
    "IMPORT_COMMAND",
    "inside_string",
]
