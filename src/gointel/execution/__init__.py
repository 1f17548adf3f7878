# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Public exports for the tool execution layer."""

from __future__ import annotations

from ..config import IntegrationConfig
from .base import ExecutionBackend
from .container import ContainerBackend, ContainerProvisioner
from .demux import DemuxedOutput, demux_stream, encode_frame
from .local import LocalBackend
from .models import (
    ContainerHandle,
    ExecSession,
    ExecutionFailure,
    ExecutionResult,
    FailureKind,
    ToolInvocation,
)


def build_backend(config: IntegrationConfig) -> ExecutionBackend:
    """Return the backend selected by ``config``.

    The choice is made once per process; the container backend provisions
    its container before returning.

    Args:
        config: Integration configuration.

    Returns:
        ExecutionBackend: Local or containerized backend.
    """

    workers = config.execution.workers
    if config.execution.backend == "container":
        return ContainerProvisioner(config.container).build_backend(workers=workers)
    return LocalBackend(workers=workers)


__all__ = [
    "ContainerBackend",
    "ContainerHandle",
    "ContainerProvisioner",
    "DemuxedOutput",
    "ExecSession",
    "ExecutionBackend",
    "ExecutionFailure",
    "ExecutionResult",
    "FailureKind",
    "LocalBackend",
    "ToolInvocation",
    "build_backend",
    "demux_stream",
    "encode_frame",
]
