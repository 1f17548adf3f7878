# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Execution backend that runs tools inside a long-lived docker container."""

from __future__ import annotations

import logging
import posixpath
import socket
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final, Protocol

import docker
from docker.errors import APIError, DockerException, NotFound

from ..config import ContainerConfig
from ..errors import StreamFramingError
from .base import ExecutionBackend
from .demux import DemuxedOutput, demux_stream
from .models import ContainerHandle, ExecSession, ExecutionResult, FailureKind, ToolInvocation

LOGGER = logging.getLogger(__name__)

COMMAND_NOT_EXECUTABLE_EXIT: Final[int] = 126
COMMAND_NOT_FOUND_EXIT: Final[int] = 127
_MISSING_EXECUTABLE_MARKERS: Final[tuple[str, ...]] = (
    "executable file not found",
    "no such file or directory",
)


class ExecApi(Protocol):
    """Subset of :class:`docker.APIClient` used for exec sessions."""

    def exec_create(self, container: str, cmd: list[str], **kwargs: Any) -> Mapping[str, Any]: ...

    def exec_start(self, exec_id: str, **kwargs: Any) -> Any: ...

    def exec_inspect(self, exec_id: str) -> Mapping[str, Any]: ...


def _reports_missing_executable(message: str) -> bool:
    lowered = message.lower()
    return any(marker in lowered for marker in _MISSING_EXECUTABLE_MARKERS)


def _raw_socket(stream: Any) -> Any:
    """Return the underlying socket of a docker-py hijacked response."""

    return getattr(stream, "_sock", stream)


class ContainerBackend(ExecutionBackend):
    """Run each invocation as a fresh exec session in one shared container."""

    in_container = True

    def __init__(
        self,
        api: ExecApi,
        handle: ContainerHandle,
        *,
        host_source_root: Path | None = None,
        container_source_root: str = "/go/src",
        workers: int = 4,
    ) -> None:
        """Create a backend bound to an already started container.

        Args:
            api: Low-level docker API client.
            handle: Running container created by :class:`ContainerProvisioner`.
            host_source_root: Host directory bind-mounted into the container.
            container_source_root: Mount point of ``host_source_root``.
            workers: Worker pool size for :meth:`submit`.
        """

        super().__init__(workers=workers)
        self._api = api
        self._handle = handle
        self._host_root = host_source_root
        self._container_root = container_source_root

    @property
    def handle(self) -> ContainerHandle:
        """Return the container this backend executes in."""

        return self._handle

    def map_path(self, path: Path | str) -> str:
        """Translate a host path under the bound source root to the container path."""

        if self._host_root is None:
            return str(path)
        try:
            relative = Path(path).relative_to(self._host_root)
        except ValueError:
            return str(path)
        return posixpath.join(self._container_root, *relative.parts)

    def execute(self, invocation: ToolInvocation) -> ExecutionResult:
        """Run ``invocation`` through a new exec session.

        Args:
            invocation: Tool invocation whose executable is resolved inside the container.

        Returns:
            ExecutionResult: Demultiplexed output or a classified failure.
        """

        try:
            session = self._create_session(invocation)
            output = self._attach(session, invocation.stdin)
            exit_code = self._api.exec_inspect(session.exec_id).get("ExitCode")
        except APIError as exc:
            explanation = str(exc.explanation or exc)
            if _reports_missing_executable(explanation):
                return ExecutionResult.failed(FailureKind.NOT_FOUND, explanation)
            return ExecutionResult.failed(FailureKind.LAUNCH_FAILED, explanation)
        except (DockerException, OSError, StreamFramingError) as exc:
            return ExecutionResult.failed(FailureKind.LAUNCH_FAILED, str(exc))

        stderr = bytes(output.stderr)
        if exit_code is None:
            return ExecutionResult.failed(
                FailureKind.LAUNCH_FAILED,
                f"exec session for {invocation.tool_name} reported no exit code",
                stderr=stderr,
            )
        # The OCI runtime reports a failed exec as 126 with its reason on stderr.
        if exit_code == COMMAND_NOT_FOUND_EXIT or (
            exit_code == COMMAND_NOT_EXECUTABLE_EXIT
            and _reports_missing_executable(stderr.decode("utf-8", errors="replace"))
        ):
            return ExecutionResult.failed(
                FailureKind.NOT_FOUND,
                f"{invocation.executable} not found in container {self._handle.container_id}",
                exit_code=exit_code,
                stderr=stderr,
            )
        if exit_code != 0:
            return ExecutionResult.failed(
                FailureKind.RUNTIME_ERROR,
                f"{invocation.tool_name} exited with status {exit_code}",
                exit_code=exit_code,
                stderr=stderr,
            )
        return ExecutionResult.success(exit_code, bytes(output.stdout), stderr)

    def _create_session(self, invocation: ToolInvocation) -> ExecSession:
        environment = [f"{key}={value}" for key, value in invocation.env.items()] or None
        created = self._api.exec_create(
            self._handle.container_id,
            list(invocation.command),
            stdin=True,
            stdout=True,
            stderr=True,
            tty=False,
            environment=environment,
        )
        session = ExecSession(container_id=self._handle.container_id, exec_id=str(created["Id"]))
        LOGGER.debug("Created exec %s for %s", session.exec_id, invocation.tool_name)
        return session

    def _attach(self, session: ExecSession, stdin: bytes | None) -> DemuxedOutput:
        stream = self._api.exec_start(session.exec_id, tty=False, socket=True)
        raw = _raw_socket(stream)
        try:
            if stdin:
                raw.sendall(stdin)
            raw.shutdown(socket.SHUT_WR)
            reader = raw.recv if hasattr(raw, "recv") else stream.read
            return demux_stream(reader)
        finally:
            stream.close()


class ContainerProvisioner:
    """Create or reuse the container the backend executes in."""

    def __init__(self, config: ContainerConfig, *, client: docker.DockerClient | None = None) -> None:
        self._config = config
        self._client = client

    @property
    def client(self) -> docker.DockerClient:
        """Return the docker client, connecting on first use."""

        if self._client is None:
            if self._config.docker_socket:
                self._client = docker.DockerClient(base_url=self._config.docker_socket)
            else:
                self._client = docker.from_env()
        return self._client

    def ensure_container(self) -> ContainerHandle:
        """Return a handle to a running container, creating it if needed.

        Returns:
            ContainerHandle: Handle for the started container.

        Raises:
            docker.errors.DockerException: If the daemon rejects any lifecycle call.
        """

        config = self._config
        if config.name:
            try:
                container = self.client.containers.get(config.name)
            except NotFound:
                container = None
            if container is not None:
                if container.status != "running":
                    LOGGER.info("Starting existing container %s", config.name)
                    container.start()
                return ContainerHandle(container_id=container.id)

        volumes: dict[str, dict[str, str]] = {}
        if config.host_source_root is not None:
            volumes[str(config.host_source_root)] = {"bind": config.container_source_root, "mode": "rw"}
        LOGGER.info("Creating container from %s", config.image)
        container = self.client.containers.create(
            config.image,
            command=list(config.keep_alive_command),
            name=config.name,
            volumes=volumes,
            working_dir=config.container_source_root,
            stdin_open=True,
            detach=True,
        )
        container.start()
        return ContainerHandle(container_id=container.id)

    def build_backend(self, *, workers: int = 4) -> ContainerBackend:
        """Ensure the container exists and return a backend bound to it."""

        handle = self.ensure_container()
        return ContainerBackend(
            self.client.api,
            handle,
            host_source_root=self._config.host_source_root,
            container_source_root=self._config.container_source_root,
            workers=workers,
        )


__all__ = ["ContainerBackend", "ContainerProvisioner", "ExecApi"]
