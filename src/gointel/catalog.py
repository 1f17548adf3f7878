# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Short-lived cache of importable packages."""

from __future__ import annotations

import logging
import os
import re
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from threading import Lock
from typing import Final

from packaging.version import InvalidVersion, Version

from .config import DEFAULT_PACKAGE_CACHE_REFRESH_MS
from .errors import MalformedOutputError, ToolLaunchError
from .execution import ExecutionResult, FailureKind
from .models import PackageInfo
from .outline import OutlineService
from .parsers import parse_package_list
from .parsers.base import decode_text
from .tools import GoTool, ToolRunner
from .workspace import current_workspace, file_dir, rewrite_vendor_path, workspace_roots

LOGGER = logging.getLogger(__name__)

VENDOR_EXPERIMENT_VAR: Final[str] = "GO15VENDOREXPERIMENT"
_GO_VERSION_PATTERN: Final[re.Pattern[str]] = re.compile(r"go(\d+(?:\.\d+)+)")

Clock = Callable[[], float]


class VendorSupportProbe:
    """Decide whether the Go toolchain resolves ``vendor`` directories.

    Go 1.5 needs ``GO15VENDOREXPERIMENT=1``, Go 1.6 enables vendoring unless the
    variable is ``0``, later releases always do. An unknown version means no
    support. The answer is computed once.
    """

    def __init__(self, runner: ToolRunner, *, env: Mapping[str, str] | None = None) -> None:
        self._runner = runner
        self._env = env
        self._supported: bool | None = None
        self._lock = Lock()

    def supported(self) -> bool:
        """Return whether vendor directories are honoured."""

        with self._lock:
            if self._supported is None:
                self._supported = self._probe()
            return self._supported

    def _probe(self) -> bool:
        result = self._runner.run(GoTool.GO, ["version"])
        if not result.ok:
            return False
        try:
            version = self.parse_version(decode_text(result, GoTool.GO.value))
        except MalformedOutputError:
            return False
        if version is None:
            return False
        return self.vendor_enabled(version, os.environ if self._env is None else self._env)

    @staticmethod
    def parse_version(output: str) -> Version | None:
        """Extract the toolchain version from ``go version`` output."""

        match = _GO_VERSION_PATTERN.search(output)
        if match is None:
            return None
        try:
            return Version(match.group(1))
        except InvalidVersion:
            return None

    @staticmethod
    def vendor_enabled(version: Version, env: Mapping[str, str]) -> bool:
        """Apply the per-release vendoring rules to ``version``."""

        if version.major != 1:
            return version.major > 1
        if version.minor == 5:
            return env.get(VENDOR_EXPERIMENT_VAR) == "1"
        if version.minor == 6:
            return env.get(VENDOR_EXPERIMENT_VAR) != "0"
        return version.minor > 6


@dataclass(frozen=True, slots=True)
class _Snapshot:
    packages: tuple[PackageInfo, ...]
    fetched_at_ms: float


class PackageCatalog:
    """List importable packages with a very short reuse window.

    The window defaults to one millisecond, so the snapshot mostly coalesces
    the lookups made while serving one request. Concurrent refreshes each
    compute their own list and the last one to finish replaces the snapshot.
    """

    def __init__(
        self,
        runner: ToolRunner,
        outline: OutlineService,
        *,
        gopath: str = "",
        refresh_interval_ms: float = DEFAULT_PACKAGE_CACHE_REFRESH_MS,
        vendor_probe: VendorSupportProbe | None = None,
        clock: Clock = time.monotonic,
    ) -> None:
        self._runner = runner
        self._outline = outline
        self._roots = workspace_roots(gopath)
        self._refresh_interval_ms = refresh_interval_ms
        self._vendor_probe = vendor_probe or VendorSupportProbe(runner)
        self._clock = clock
        self._snapshot: _Snapshot | None = None
        self._lock = Lock()

    @property
    def cached(self) -> tuple[PackageInfo, ...]:
        """Return the most recent snapshot regardless of its age."""

        with self._lock:
            return self._snapshot.packages if self._snapshot is not None else ()

    def list_packages(self, *, exclude_imported: bool = False, current_file: Path | str | None = None) -> list[PackageInfo]:
        """Return importable packages sorted by path.

        Args:
            exclude_imported: Drop packages already imported by ``current_file``.
            current_file: File being edited; drives vendor rewriting and exclusion.

        Returns:
            list[PackageInfo]: Packages sorted by full path, without duplicates.

        Raises:
            ToolLaunchError: If ``gopkgs`` could not be started.
        """

        now_ms = self._clock() * 1000
        with self._lock:
            snapshot = self._snapshot
        if snapshot is not None and now_ms - snapshot.fetched_at_ms < self._refresh_interval_ms:
            return list(snapshot.packages)

        listing = self._runner.submit(GoTool.PACKAGES)
        imported: list[str] = []
        if exclude_imported and current_file is not None:
            imported = self._outline.imported_packages(current_file)
        vendor_supported = self._vendor_probe.supported()
        raw = self._package_paths(listing.result())
        if raw is None:
            return []

        if vendor_supported and current_file is not None:
            paths = self._vendor_aware(raw, imported, str(current_file))
        else:
            excluded = set(imported)
            paths = sorted({path for path in raw if path not in excluded})

        packages = tuple(PackageInfo.from_path(path) for path in paths)
        with self._lock:
            self._snapshot = _Snapshot(packages=packages, fetched_at_ms=now_ms)
        return list(packages)

    def matching_packages(self, prefix: str) -> list[PackageInfo]:
        """Return cached packages whose short name starts with ``prefix``."""

        if not prefix:
            return []
        return [package for package in self.cached if package.name.startswith(prefix)]

    def package_path_for_name(self, name: str) -> str | None:
        """Return the path of the only cached package called ``name``."""

        matches = [package for package in self.cached if package.name == name]
        return matches[0].path if len(matches) == 1 else None

    def _package_paths(self, result: ExecutionResult) -> list[str] | None:
        failure = result.failure
        if failure is not None:
            if failure.kind is FailureKind.LAUNCH_FAILED:
                raise ToolLaunchError(GoTool.PACKAGES.value, failure.message)
            if failure.kind is FailureKind.RUNTIME_ERROR:
                LOGGER.warning("gopkgs failed: %s", failure.stderr_text.strip() or failure.message)
            return None
        try:
            return parse_package_list(decode_text(result, GoTool.PACKAGES.value))
        except MalformedOutputError as exc:
            LOGGER.warning("Discarding gopkgs output: %s", exc)
            return None

    def _vendor_aware(self, raw: list[str], imported: list[str], current_file: str) -> list[str]:
        directory = file_dir(current_file)
        workspace = current_workspace(self._roots, directory)
        excluded = set(imported)
        paths: set[str] = set()
        for package in raw:
            if not package or package in excluded:
                continue
            paths.add(rewrite_vendor_path(package, workspace, directory))
        return sorted(paths)


__all__ = ["PackageCatalog", "VendorSupportProbe"]
