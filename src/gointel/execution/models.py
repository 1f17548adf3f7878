# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Value types exchanged with execution backends."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType


class FailureKind(str, Enum):
    """Classify why a tool invocation did not produce a usable result."""

    NOT_FOUND = "not-found"
    LAUNCH_FAILED = "launch-failed"
    RUNTIME_ERROR = "runtime-error"


@dataclass(frozen=True, slots=True)
class ToolInvocation:
    """Describe a single external tool run.

    Attributes:
        tool_name: Logical tool name used for diagnostics and provisioning.
        executable: Resolved executable path (local) or bare name (container).
        args: Arguments following the executable.
        stdin: Optional payload written to the tool's standard input.
        env: Environment overrides layered on the backend's base environment.
    """

    tool_name: str
    executable: str
    args: tuple[str, ...] = ()
    stdin: bytes | None = None
    env: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))
        object.__setattr__(self, "env", MappingProxyType(dict(self.env)))

    @property
    def command(self) -> tuple[str, ...]:
        """Return the executable followed by its arguments."""

        return (self.executable, *self.args)


@dataclass(frozen=True, slots=True)
class ExecutionFailure:
    """Describe a failed invocation."""

    kind: FailureKind
    message: str
    exit_code: int | None = None
    stderr: bytes = b""

    @property
    def stderr_text(self) -> str:
        """Return stderr decoded as UTF-8, replacing undecodable bytes."""

        return self.stderr.decode("utf-8", errors="replace")


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    """Outcome of a tool invocation.

    Exactly one of ``exit_code`` and ``failure`` is populated. Use
    :meth:`success` and :meth:`failed` rather than the raw constructor.
    """

    exit_code: int | None = None
    stdout: bytes = b""
    stderr: bytes = b""
    failure: ExecutionFailure | None = None

    def __post_init__(self) -> None:
        if (self.exit_code is None) == (self.failure is None):
            raise ValueError("ExecutionResult requires exactly one of exit_code or failure")

    @classmethod
    def success(cls, exit_code: int, stdout: bytes = b"", stderr: bytes = b"") -> ExecutionResult:
        """Build a result for a process that ran to completion."""

        return cls(exit_code=exit_code, stdout=stdout, stderr=stderr)

    @classmethod
    def failed(
        cls,
        kind: FailureKind,
        message: str,
        *,
        exit_code: int | None = None,
        stderr: bytes = b"",
    ) -> ExecutionResult:
        """Build a result describing a failed invocation.

        Args:
            kind: Failure classification.
            message: Human readable explanation.
            exit_code: Exit status when the tool ran but failed.
            stderr: Captured standard error, if any.

        Returns:
            ExecutionResult: Result carrying only the failure.
        """

        return cls(failure=ExecutionFailure(kind=kind, message=message, exit_code=exit_code, stderr=stderr))

    @property
    def ok(self) -> bool:
        """Return ``True`` when the invocation succeeded."""

        return self.failure is None

    @property
    def not_found(self) -> bool:
        """Return ``True`` when the tool binary could not be located."""

        return self.failure is not None and self.failure.kind is FailureKind.NOT_FOUND

    @property
    def stdout_text(self) -> str:
        """Return stdout decoded as UTF-8.

        Raises:
            UnicodeDecodeError: If stdout is not valid UTF-8.
        """

        return self.stdout.decode("utf-8")

    @property
    def stderr_text(self) -> str:
        """Return stderr decoded as UTF-8, replacing undecodable bytes."""

        if self.failure is not None:
            return self.failure.stderr_text
        return self.stderr.decode("utf-8", errors="replace")


@dataclass(frozen=True, slots=True)
class ContainerHandle:
    """Reference to the running container hosting the tools."""

    container_id: str


@dataclass(frozen=True, slots=True)
class ExecSession:
    """Exec session created inside a container for one invocation."""

    container_id: str
    exec_id: str


__all__ = [
    "ContainerHandle",
    "ExecSession",
    "ExecutionFailure",
    "ExecutionResult",
    "FailureKind",
    "ToolInvocation",
]
