# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

from __future__ import annotations

import os

import pytest
from helpers.fakes import LAUNCH_FAILED, NOT_FOUND, RUNTIME_ERROR, FakeBackend, RecordingProvisioner, import_decl, outline_output, stdout
from packaging.version import Version

from gointel.catalog import PackageCatalog, VendorSupportProbe
from gointel.errors import ToolLaunchError
from gointel.outline import OutlineService
from gointel.tools import GoTool, ToolRunner

GO_1_21 = stdout("go version go1.21.0 linux/amd64\n")
GO_1_4 = stdout("go version go1.4.3 linux/amd64\n")
APP_FILE = "/ws/src/github.com/acme/app/cmd/main.go"


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def _catalog(runner: ToolRunner, *, clock: FakeClock | None = None) -> PackageCatalog:
    return PackageCatalog(
        runner,
        OutlineService(runner),
        gopath="/ws",
        vendor_probe=VendorSupportProbe(runner, env={}),
        clock=clock or FakeClock(),
    )


def test_list_packages_sorts_and_deduplicates(runner: ToolRunner, backend: FakeBackend) -> None:
    backend.on(GoTool.GO, GO_1_4)
    backend.on(GoTool.PACKAGES, stdout("strings\nfmt\nnet/http\nfmt\n"))
    packages = _catalog(runner).list_packages()
    assert [package.path for package in packages] == ["fmt", "net/http", "strings"]
    assert [package.name for package in packages] == ["fmt", "http", "strings"]


def test_list_packages_excludes_imported(runner: ToolRunner, backend: FakeBackend) -> None:
    backend.on(GoTool.GO, GO_1_4)
    backend.on(GoTool.PACKAGES, stdout("fmt\nos\nstrings\n"))
    backend.on(GoTool.OUTLINE, outline_output(import_decl("fmt"), import_decl("os", start=25)))
    packages = _catalog(runner).list_packages(exclude_imported=True, current_file=APP_FILE)
    assert [package.path for package in packages] == ["strings"]
    assert backend.calls(GoTool.OUTLINE)[0].args == ("-f", APP_FILE)


@pytest.mark.skipif(os.name == "nt", reason="POSIX path fixtures")
def test_list_packages_rewrites_vendored_paths(runner: ToolRunner, backend: FakeBackend) -> None:
    backend.on(GoTool.GO, GO_1_21)
    backend.on(
        GoTool.PACKAGES,
        stdout(
            "github.com/acme/app/vendor/github.com/pkg/errors\n"
            "github.com/pkg/errors\n"
            "github.com/other/lib/vendor/golang.org/x/net/context\n"
            "\n"
            "fmt\n"
        ),
    )
    packages = _catalog(runner).list_packages(current_file=APP_FILE)
    assert [package.path for package in packages] == [
        "fmt",
        "github.com/other/lib/vendor/golang.org/x/net/context",
        "github.com/pkg/errors",
    ]


def test_list_packages_reuses_snapshot_within_window(runner: ToolRunner, backend: FakeBackend) -> None:
    clock = FakeClock()
    backend.on(GoTool.GO, GO_1_4)
    backend.on(GoTool.PACKAGES, stdout("fmt\n"))
    catalog = _catalog(runner, clock=clock)

    catalog.list_packages()
    clock.now += 0.0005
    catalog.list_packages()
    assert len(backend.calls(GoTool.PACKAGES)) == 1

    clock.now += 0.01
    backend.on(GoTool.PACKAGES, stdout("fmt\nos\n"))
    assert [package.path for package in catalog.list_packages()] == ["fmt", "os"]
    assert len(backend.calls(GoTool.PACKAGES)) == 2
    assert len(backend.calls(GoTool.GO)) == 1


def test_list_packages_missing_tool_returns_empty_without_caching(
    runner: ToolRunner, backend: FakeBackend, provisioner: RecordingProvisioner
) -> None:
    backend.on(GoTool.GO, GO_1_4)
    backend.on(GoTool.PACKAGES, NOT_FOUND)
    catalog = _catalog(runner)
    assert catalog.list_packages() == []
    assert catalog.cached == ()
    assert provisioner.missing == [(GoTool.PACKAGES, False)]


def test_list_packages_runtime_error_returns_empty(runner: ToolRunner, backend: FakeBackend) -> None:
    backend.on(GoTool.GO, GO_1_4)
    backend.on(GoTool.PACKAGES, RUNTIME_ERROR)
    assert _catalog(runner).list_packages() == []


def test_list_packages_launch_failure_raises(runner: ToolRunner, backend: FakeBackend) -> None:
    backend.on(GoTool.GO, GO_1_4)
    backend.on(GoTool.PACKAGES, LAUNCH_FAILED)
    with pytest.raises(ToolLaunchError):
        _catalog(runner).list_packages()


def test_name_lookups_use_cached_snapshot(runner: ToolRunner, backend: FakeBackend) -> None:
    backend.on(GoTool.GO, GO_1_4)
    backend.on(GoTool.PACKAGES, stdout("log\ngithub.com/acme/log\nstrings\nstrconv\n"))
    catalog = _catalog(runner)
    assert catalog.package_path_for_name("strings") is None
    catalog.list_packages()
    assert catalog.package_path_for_name("strings") == "strings"
    assert catalog.package_path_for_name("log") is None
    assert [package.path for package in catalog.matching_packages("str")] == ["strconv", "strings"]
    assert catalog.matching_packages("") == []


@pytest.mark.parametrize(
    ("output", "expected"),
    [
        ("go version go1.21.0 linux/amd64", Version("1.21.0")),
        ("go version go1.5 darwin/amd64", Version("1.5")),
        ("go version devel +abc linux/amd64", None),
    ],
)
def test_parse_version(output: str, expected: Version | None) -> None:
    assert VendorSupportProbe.parse_version(output) == expected


@pytest.mark.parametrize(
    ("version", "env", "expected"),
    [
        ("1.4.3", {"GO15VENDOREXPERIMENT": "1"}, False),
        ("1.5.4", {}, False),
        ("1.5.4", {"GO15VENDOREXPERIMENT": "1"}, True),
        ("1.6.2", {}, True),
        ("1.6.2", {"GO15VENDOREXPERIMENT": "0"}, False),
        ("1.7", {"GO15VENDOREXPERIMENT": "0"}, True),
        ("1.21.0", {}, True),
        ("2.0", {}, True),
    ],
)
def test_vendor_enabled_rules(version: str, env: dict[str, str], expected: bool) -> None:
    assert VendorSupportProbe.vendor_enabled(Version(version), env) is expected


def test_vendor_probe_memoizes_and_handles_missing_go(runner: ToolRunner, backend: FakeBackend) -> None:
    backend.on(GoTool.GO, GO_1_21)
    probe = VendorSupportProbe(runner, env={})
    assert probe.supported() is True
    assert probe.supported() is True
    assert len(backend.calls(GoTool.GO)) == 1

    backend.on(GoTool.GO, NOT_FOUND)
    assert VendorSupportProbe(runner, env={}).supported() is False
