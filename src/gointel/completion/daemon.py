# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""One-time configuration of the shared ``gocode`` daemon."""

from __future__ import annotations

import logging
from concurrent.futures import Future
from threading import Lock

from ..tools import GoTool, ToolRunner

LOGGER = logging.getLogger(__name__)


class DaemonConfigurator:
    """Issue the gocode ``set`` commands exactly once per process.

    The first caller creates a future and performs the configuration; callers
    arriving while it is in flight wait on the same future. Failures are
    logged and still count as done, so the commands are never re-issued.
    """

    def __init__(self, runner: ToolRunner, *, autobuild: bool) -> None:
        self._runner = runner
        self._autobuild = autobuild
        self._latch: Future[None] | None = None
        self._lock = Lock()

    @property
    def configured(self) -> bool:
        """Return ``True`` once the configuration step has finished."""

        with self._lock:
            return self._latch is not None and self._latch.done()

    def ensure_configured(self) -> None:
        """Configure the daemon on first use and wait for completion."""

        with self._lock:
            latch = self._latch
            owner = latch is None
            if latch is None:
                latch = self._latch = Future()
        if owner:
            try:
                self._configure()
            finally:
                latch.set_result(None)
        latch.result()

    def _configure(self) -> None:
        commands = (
            ["set", "propose-builtins", "true"],
            ["set", "autobuild", "true" if self._autobuild else "false"],
        )
        for args in commands:
            result = self._runner.run(GoTool.COMPLETION, args)
            if result.failure is not None:
                LOGGER.warning("gocode %s failed: %s", " ".join(args), result.failure.message)


__all__ = ["DaemonConfigurator"]
