# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and loaders for the gointel integration layer."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Final, Literal, cast

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigError

DEFAULT_PACKAGE_CACHE_REFRESH_MS: Final[float] = 1.0
DEFAULT_CONTAINER_SOURCE_ROOT: Final[str] = "/go/src"
BACKEND_ENV_VAR: Final[str] = "GOINTEL_BACKEND"
_TOOL_TABLE: Final[str] = "gointel"

BackendName = Literal["local", "container"]


class ContainerConfig(BaseModel):
    """Settings for the long-running container hosting the Go tools."""

    model_config = ConfigDict(validate_assignment=True)

    image: str = "golang:latest"
    name: str | None = "gointel-tools"
    docker_socket: str | None = None
    host_source_root: Path | None = None
    container_source_root: str = DEFAULT_CONTAINER_SOURCE_ROOT
    keep_alive_command: list[str] = Field(default_factory=lambda: ["tail", "-f", "/dev/null"])


class ExecutionConfig(BaseModel):
    """Execution backend selection."""

    model_config = ConfigDict(validate_assignment=True)

    backend: BackendName = "local"
    workers: int = Field(default=4, ge=1)


class CompletionConfig(BaseModel):
    """Behaviour toggles for the completion orchestrator."""

    model_config = ConfigDict(validate_assignment=True)

    autocomplete_unimported_packages: bool = False
    use_code_snippets_on_function_suggest: bool = False
    gocode_autobuild: bool = False
    package_cache_refresh_ms: float = Field(default=DEFAULT_PACKAGE_CACHE_REFRESH_MS, ge=0)


class ToolsConfig(BaseModel):
    """Tool lookup and invocation settings."""

    model_config = ConfigDict(validate_assignment=True)

    paths: dict[str, Path] = Field(default_factory=dict)
    build_tags: str = ""
    gopath: str = ""
    goroot: str | None = None


class IntegrationConfig(BaseModel):
    """Top-level configuration consumed by :class:`gointel.session.GoToolSession`."""

    model_config = ConfigDict(validate_assignment=True)

    execution: ExecutionConfig = Field(default_factory=ExecutionConfig)
    container: ContainerConfig = Field(default_factory=ContainerConfig)
    completion: CompletionConfig = Field(default_factory=CompletionConfig)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)


def _read_toml(path: Path) -> dict[str, object]:
    """Return the gointel table stored in ``path``.

    ``pyproject.toml`` style files keep settings under ``[tool.gointel]``;
    dedicated files may use top-level tables.

    Args:
        path: TOML file to read.

    Returns:
        dict[str, object]: Raw configuration mapping.

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Unable to read configuration from {path}: {exc}") from exc
    tool_section = data.get("tool")
    if isinstance(tool_section, dict) and isinstance(tool_section.get(_TOOL_TABLE), dict):
        return cast(dict[str, object], tool_section[_TOOL_TABLE])
    return cast(dict[str, object], data)


def _apply_environment(raw: dict[str, object], env: Mapping[str, str]) -> dict[str, object]:
    """Fill settings the file leaves unset from ``env``."""

    tools = dict(cast(Mapping[str, object], raw.get("tools") or {}))
    if not tools.get("gopath") and env.get("GOPATH"):
        tools["gopath"] = env["GOPATH"]
    if not tools.get("goroot") and env.get("GOROOT"):
        tools["goroot"] = env["GOROOT"]
    execution = dict(cast(Mapping[str, object], raw.get("execution") or {}))
    if "backend" not in execution and env.get(BACKEND_ENV_VAR):
        execution["backend"] = env[BACKEND_ENV_VAR]
    merged = dict(raw)
    merged["tools"] = tools
    merged["execution"] = execution
    return merged


def load_config(path: Path | None = None, *, env: Mapping[str, str] | None = None) -> IntegrationConfig:
    """Load configuration from ``path`` and the process environment.

    Args:
        path: Optional TOML file holding gointel settings.
        env: Environment mapping, defaults to :data:`os.environ`.

    Returns:
        IntegrationConfig: Validated configuration.

    Raises:
        ConfigError: If the file is unreadable or the settings are invalid.
    """

    raw = _read_toml(path) if path is not None else {}
    merged = _apply_environment(raw, os.environ if env is None else env)
    try:
        return IntegrationConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc


__all__ = [
    "BackendName",
    "CompletionConfig",
    "ContainerConfig",
    "DEFAULT_PACKAGE_CACHE_REFRESH_MS",
    "ExecutionConfig",
    "IntegrationConfig",
    "ToolsConfig",
    "load_config",
]
