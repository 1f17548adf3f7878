# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Host subprocess execution for tool invocations."""

from __future__ import annotations

import os
import shutil

# Bandit: subprocess usage is intentional; tool arguments are passed as a list
# without shell expansion.
import subprocess  # nosec B404
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from subprocess import CompletedProcess


@dataclass(frozen=True, slots=True)
class CommandOptions:
    """Working directory, environment and stdin for one subprocess."""

    cwd: Path | None = None
    env: Mapping[str, str] | None = None
    stdin: bytes | None = None
    inherit_env: bool = True

    def environment(self) -> dict[str, str] | None:
        """Return the environment passed to the child process.

        Overrides are layered on top of the inherited process environment
        unless ``inherit_env`` is disabled.

        Returns:
            dict[str, str] | None: Environment mapping or ``None`` to inherit unchanged.
        """

        if not self.env:
            return None if self.inherit_env else {}
        merged = os.environ.copy() if self.inherit_env else {}
        merged.update(self.env)
        return merged


def _normalize_args(args: Sequence[str]) -> list[str]:
    """Resolve the executable at the head of ``args``.

    Args:
        args: Executable followed by its arguments.

    Returns:
        list[str]: Argument list whose head is an absolute executable path.

    Raises:
        ValueError: If no arguments are provided.
        FileNotFoundError: If the executable cannot be located.
    """

    if not args:
        raise ValueError("subprocess command requires at least one argument")

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        if not head_path.exists():
            raise FileNotFoundError(f"Executable '{head}' does not exist")
        return [str(head_path), *rest]

    resolved = shutil.which(head)
    if resolved is None:
        raise FileNotFoundError(f"Executable '{head}' was not found on PATH")
    return [resolved, *rest]


def run_command(
    args: Sequence[str],
    *,
    options: CommandOptions | None = None,
) -> CompletedProcess[bytes]:
    """Execute ``args`` and capture both output streams as bytes.

    The stdin payload, when present, is written in full and the stream is
    closed before waiting; otherwise stdin is detached from the parent.

    Args:
        args: Command and argument sequence to execute.
        options: Execution options (working directory, environment, stdin).

    Returns:
        CompletedProcess[bytes]: Finished process metadata. Non-zero exit codes
        are returned, not raised.

    Raises:
        FileNotFoundError: If the executable cannot be resolved.
        OSError: If the operating system refuses to spawn the process.
    """

    resolved_options = options or CommandOptions()
    normalized = _normalize_args(args)
    return subprocess.run(  # nosec B603 - argument list, no shell
        normalized,
        cwd=str(resolved_options.cwd) if resolved_options.cwd is not None else None,
        env=resolved_options.environment(),
        check=False,
        capture_output=True,
        input=resolved_options.stdin,
        stdin=None if resolved_options.stdin is not None else subprocess.DEVNULL,
    )


__all__ = ["CommandOptions", "run_command"]
