# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Backend abstraction for running external analysis tools."""

from __future__ import annotations

from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from threading import Lock

from .models import ExecutionResult, ToolInvocation


class ExecutionBackend(ABC):
    """Strategy object that runs a :class:`ToolInvocation` somewhere.

    ``execute`` blocks the calling thread until the tool exits; no timeout is
    applied. ``submit`` schedules the same work on a worker pool owned by the
    backend so that independent invocations can overlap.
    """

    in_container: bool = False

    def __init__(self, *, workers: int = 4) -> None:
        self._workers = workers
        self._executor: ThreadPoolExecutor | None = None
        self._executor_lock = Lock()

    @abstractmethod
    def execute(self, invocation: ToolInvocation) -> ExecutionResult:
        """Run ``invocation`` and return its outcome without raising."""

    def submit(self, invocation: ToolInvocation) -> Future[ExecutionResult]:
        """Schedule ``invocation`` on the backend worker pool.

        Args:
            invocation: Tool run to execute.

        Returns:
            Future[ExecutionResult]: Future resolved with the invocation outcome.
        """

        return self._pool().submit(self.execute, invocation)

    def map_path(self, path: Path | str) -> str:
        """Return ``path`` as seen by tools running in this backend."""

        return str(path)

    def close(self) -> None:
        """Release the worker pool; pending invocations run to completion."""

        with self._executor_lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)

    def _pool(self) -> ThreadPoolExecutor:
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._workers,
                    thread_name_prefix=f"gointel-{type(self).__name__.lower()}",
                )
            return self._executor


__all__ = ["ExecutionBackend"]
