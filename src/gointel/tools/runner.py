# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolve, invoke and classify external tool runs."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from concurrent.futures import Future

from ..execution import ExecutionBackend, ExecutionResult, ToolInvocation
from .provisioning import ToolProvisioner
from .registry import GoTool, ToolResolver

LOGGER = logging.getLogger(__name__)


class ToolRunner:
    """Glue between the resolver, the execution backend and the provisioner."""

    def __init__(self, backend: ExecutionBackend, resolver: ToolResolver, provisioner: ToolProvisioner) -> None:
        self._backend = backend
        self._resolver = resolver
        self._provisioner = provisioner

    @property
    def backend(self) -> ExecutionBackend:
        """Return the execution backend used for every invocation."""

        return self._backend

    def invocation(
        self,
        tool: GoTool,
        args: Sequence[str] = (),
        *,
        stdin: bytes | None = None,
        env: Mapping[str, str] | None = None,
    ) -> ToolInvocation:
        """Build the invocation for ``tool`` with a resolved executable."""

        return ToolInvocation(
            tool_name=tool.value,
            executable=self._resolver.resolve(tool),
            args=tuple(args),
            stdin=stdin,
            env=dict(env or {}),
        )

    def run(
        self,
        tool: GoTool,
        args: Sequence[str] = (),
        *,
        stdin: bytes | None = None,
        env: Mapping[str, str] | None = None,
    ) -> ExecutionResult:
        """Run ``tool`` and return its result.

        A missing executable is reported to the provisioner and returned as a
        ``NOT_FOUND`` result; nothing is raised.

        Args:
            tool: Logical tool to run.
            args: Arguments following the executable.
            stdin: Optional payload for standard input.
            env: Environment overrides.

        Returns:
            ExecutionResult: Outcome reported by the backend.
        """

        result = self._backend.execute(self.invocation(tool, args, stdin=stdin, env=env))
        return self._route(tool, result)

    def submit(
        self,
        tool: GoTool,
        args: Sequence[str] = (),
        *,
        stdin: bytes | None = None,
        env: Mapping[str, str] | None = None,
    ) -> Future[ExecutionResult]:
        """Schedule ``tool`` on the backend pool; see :meth:`run`."""

        routed: Future[ExecutionResult] = Future()
        pending = self._backend.submit(self.invocation(tool, args, stdin=stdin, env=env))
        pending.add_done_callback(lambda done: self._settle(tool, done, routed))
        return routed

    def _settle(self, tool: GoTool, done: Future[ExecutionResult], routed: Future[ExecutionResult]) -> None:
        error = done.exception()
        if error is not None:
            routed.set_exception(error)
            return
        routed.set_result(self._route(tool, done.result()))

    def _route(self, tool: GoTool, result: ExecutionResult) -> ExecutionResult:
        if result.not_found:
            LOGGER.info("%s is not installed", tool.value)
            self._provisioner.prompt_for_missing_tool(tool, in_container=self._backend.in_container)
        return result


__all__ = ["ToolRunner"]
