# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Execution backend spawning tools directly on the host."""

from __future__ import annotations

import logging

from ..process_utils import CommandOptions, run_command
from .base import ExecutionBackend
from .models import ExecutionResult, FailureKind, ToolInvocation

LOGGER = logging.getLogger(__name__)


class LocalBackend(ExecutionBackend):
    """Run tools as host subprocesses with fully buffered output."""

    def execute(self, invocation: ToolInvocation) -> ExecutionResult:
        """Spawn the invocation and collect its output.

        Args:
            invocation: Resolved tool invocation.

        Returns:
            ExecutionResult: ``NOT_FOUND`` when the executable is missing,
            ``LAUNCH_FAILED`` when the OS refuses to start it,
            ``RUNTIME_ERROR`` on a non-zero exit, otherwise a success.
        """

        options = CommandOptions(env=invocation.env, stdin=invocation.stdin)
        LOGGER.debug("Running %s", " ".join(invocation.command))
        try:
            completed = run_command(invocation.command, options=options)
        except FileNotFoundError as exc:
            return ExecutionResult.failed(FailureKind.NOT_FOUND, str(exc))
        except OSError as exc:
            return ExecutionResult.failed(FailureKind.LAUNCH_FAILED, str(exc))

        if completed.returncode != 0:
            LOGGER.debug("%s exited with status %s", invocation.tool_name, completed.returncode)
            return ExecutionResult.failed(
                FailureKind.RUNTIME_ERROR,
                f"{invocation.tool_name} exited with status {completed.returncode}",
                exit_code=completed.returncode,
                stderr=completed.stderr or b"",
            )
        return ExecutionResult.success(completed.returncode, completed.stdout or b"", completed.stderr or b"")


__all__ = ["LocalBackend"]
