# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Long-lived owner of the integration layer's shared state."""

from __future__ import annotations

from dataclasses import dataclass

from .catalog import PackageCatalog
from .completion import CompletionOrchestrator, DaemonConfigurator
from .config import IntegrationConfig
from .execution import ExecutionBackend, build_backend
from .imports import ImportService
from .outline import OutlineService
from .rename import RenameService
from .tools import (
    ConsoleToolProvisioner,
    ContainerToolResolver,
    LocalToolResolver,
    ToolProvisioner,
    ToolResolver,
    ToolRunner,
)


@dataclass(slots=True)
class GoToolSession:
    """Bundle of services sharing one backend, catalog and daemon latch."""

    config: IntegrationConfig
    runner: ToolRunner
    outline: OutlineService
    catalog: PackageCatalog
    imports: ImportService
    completion: CompletionOrchestrator
    rename: RenameService

    @classmethod
    def from_config(
        cls,
        config: IntegrationConfig,
        *,
        backend: ExecutionBackend | None = None,
        provisioner: ToolProvisioner | None = None,
    ) -> GoToolSession:
        """Wire every service for ``config``.

        Args:
            config: Integration configuration.
            backend: Pre-built backend; defaults to the configured one.
            provisioner: Missing-tool collaborator; defaults to console hints.

        Returns:
            GoToolSession: Ready-to-use session.
        """

        backend = backend or build_backend(config)
        resolver: ToolResolver
        if backend.in_container:
            resolver = ContainerToolResolver()
        else:
            resolver = LocalToolResolver(
                overrides=config.tools.paths,
                gopath=config.tools.gopath,
                goroot=config.tools.goroot,
            )
        runner = ToolRunner(backend, resolver, provisioner or ConsoleToolProvisioner())
        outline = OutlineService(runner)
        catalog = PackageCatalog(
            runner,
            outline,
            gopath=config.tools.gopath,
            refresh_interval_ms=config.completion.package_cache_refresh_ms,
        )
        daemon = DaemonConfigurator(runner, autobuild=config.completion.gocode_autobuild)
        return cls(
            config=config,
            runner=runner,
            outline=outline,
            catalog=catalog,
            imports=ImportService(catalog),
            completion=CompletionOrchestrator(runner, catalog, daemon, config.completion),
            rename=RenameService(runner, build_tags=config.tools.build_tags),
        )

    def close(self) -> None:
        """Shut down the backend worker pool."""

        self.runner.backend.close()


__all__ = ["GoToolSession"]
