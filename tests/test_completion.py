# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from helpers.fakes import NOT_FOUND, RUNTIME_ERROR, FakeBackend, RecordingProvisioner, gocode_output, stdout

from gointel.catalog import PackageCatalog, VendorSupportProbe
from gointel.completion import IMPORT_COMMAND, CompletionOrchestrator, CompletionRequest, DaemonConfigurator, inside_string
from gointel.config import CompletionConfig
from gointel.errors import ToolExecutionError
from gointel.execution import ExecutionResult, ToolInvocation
from gointel.models import CompletionKind, Position, TextEdit
from gointel.outline import OutlineService
from gointel.tools import GoTool, ToolRunner

FILENAME = "/ws/src/app/main.go"
MEMBER_ACCESS = "package main\n\nfunc main() {\n\tstrings.\n}\n"


def _orchestrator(runner: ToolRunner, **options: bool) -> CompletionOrchestrator:
    outline = OutlineService(runner)
    catalog = PackageCatalog(runner, outline, vendor_probe=VendorSupportProbe(runner, env={}))
    daemon = DaemonConfigurator(runner, autobuild=False)
    return CompletionOrchestrator(runner, catalog, daemon, CompletionConfig(**options))


def _gocode(autocomplete):
    """Answer ``gocode set`` with success and delegate autocomplete calls."""

    def handler(invocation: ToolInvocation) -> ExecutionResult:
        if invocation.args[0] == "set":
            return ExecutionResult.success(0)
        return autocomplete(invocation)

    return handler


def _autocomplete_calls(backend: FakeBackend) -> list[ToolInvocation]:
    return [call for call in backend.calls(GoTool.COMPLETION) if call.args[0] != "set"]


@pytest.mark.parametrize(
    ("prefix", "expected"),
    [
        ('x := "abc', True),
        ('x := "a" + "b', True),
        ('x := "a"', False),
        ('x := "a\\"b', True),
        ("x := 1", False),
        ('x := "a\\\\"', False),
        ('x := "a\\\\" + "b', True),
        ('x := "a\\\\\\"b', True),
    ],
)
def test_inside_string(prefix: str, expected: bool) -> None:
    assert inside_string(prefix) is expected


def test_complete_skips_comments_and_numbers(runner: ToolRunner, backend: FakeBackend) -> None:
    orchestrator = _orchestrator(runner)
    text = "package main\n\n  // fmt.\nvar x = 12\n"
    assert orchestrator.complete(CompletionRequest(FILENAME, text, 2, 9)) == []
    assert orchestrator.complete(CompletionRequest(FILENAME, text, 3, 10)) == []
    assert backend.invocations == []


def test_complete_runs_gocode_after_configuring_daemon(runner: ToolRunner, backend: FakeBackend) -> None:
    backend.on(GoTool.COMPLETION, _gocode(lambda _: gocode_output(("func", "Println", "func(a ...interface{})"))))
    text = "package main\n\nfunc main() {\n\tfmt.Pr\n}\n"

    suggestions = _orchestrator(runner).complete(CompletionRequest(FILENAME, text, 3, 7))

    assert [(item.display_name, item.kind) for item in suggestions] == [("Println", CompletionKind.FUNCTION)]
    calls = backend.calls(GoTool.COMPLETION)
    assert [call.args for call in calls[:2]] == [("set", "propose-builtins", "true"), ("set", "autobuild", "false")]
    autocomplete = calls[2]
    assert autocomplete.args == ("-f=json", "autocomplete", FILENAME, "c35")
    assert autocomplete.stdin == text.encode("utf-8")
    assert dict(autocomplete.env) == {"GOOS": "", "GOARCH": ""}
    assert backend.calls(GoTool.PACKAGES) == []


def test_complete_uses_function_snippets_when_enabled(runner: ToolRunner, backend: FakeBackend) -> None:
    backend.on(GoTool.COMPLETION, _gocode(lambda _: gocode_output(("func", "Trim", "func(s string, cutset string) string"))))
    text = "package main\n\nfunc main() {\n\tstrings.Tr\n}\n"
    orchestrator = _orchestrator(runner, use_code_snippets_on_function_suggest=True)
    suggestions = orchestrator.complete(CompletionRequest(FILENAME, text, 3, 11))
    assert suggestions[0].insert_text == "Trim({{s string}}, {{cutset string}}) {{}}"


def test_complete_inside_import_string(runner: ToolRunner, backend: FakeBackend) -> None:
    backend.on(
        GoTool.COMPLETION,
        _gocode(lambda _: gocode_output(("import", "fmt", ""), ("func", "Func", "func()"))),
    )
    text = 'package main\n\nimport "fm\n'
    suggestions = _orchestrator(runner).complete(CompletionRequest(FILENAME, text, 2, 10))
    assert [item.display_name for item in suggestions] == ["fmt"]
    assert suggestions[0].text_edit is not None
    assert suggestions[0].text_edit.range.start == Position(2, 8)


def test_complete_appends_unimported_packages(runner: ToolRunner, backend: FakeBackend) -> None:
    backend.on(GoTool.GO, stdout("go version go1.4 linux/amd64\n"))
    backend.on(GoTool.PACKAGES, stdout("strings\nfmt\ngithub.com/acme/strutil\n"))
    backend.on(GoTool.COMPLETION, _gocode(lambda _: stdout("[]")))
    text = "package main\n\nfunc main() {\n\tstr\n}\n"

    suggestions = _orchestrator(runner, autocomplete_unimported_packages=True).complete(
        CompletionRequest(FILENAME, text, 3, 4)
    )

    assert [(item.display_name, item.detail) for item in suggestions] == [
        ("strutil", "github.com/acme/strutil"),
        ("strings", "strings"),
    ]
    first = suggestions[0]
    assert first.kind is CompletionKind.KEYWORD
    assert first.insert_text == "strutil"
    assert first.command is not None
    assert first.command.command == IMPORT_COMMAND
    assert first.command.arguments == ("github.com/acme/strutil",)


def test_complete_retries_with_speculative_import(runner: ToolRunner, backend: FakeBackend) -> None:
    backend.on(GoTool.GO, stdout("go version go1.4 linux/amd64\n"))
    backend.on(GoTool.PACKAGES, stdout("fmt\nstrings\n"))

    def autocomplete(invocation: ToolInvocation) -> ExecutionResult:
        if invocation.stdin is not None and b'import "strings"' in invocation.stdin:
            return gocode_output(("func", "Trim", "func(s string, cutset string) string"))
        return stdout("[]")

    backend.on(GoTool.COMPLETION, _gocode(autocomplete))

    suggestions = _orchestrator(runner, autocomplete_unimported_packages=True).complete(
        CompletionRequest(FILENAME, MEMBER_ACCESS, 3, 9)
    )

    assert [item.display_name for item in suggestions] == ["Trim"]
    assert suggestions[0].associated_edits == [TextEdit.insert(Position(1, 0), '\nimport (\n\t"strings"\n)\n')]
    first, retry = _autocomplete_calls(backend)
    inserted = 'import "strings"\n'
    assert first.args[-1] == "c37"
    assert retry.args[-1] == f"c{37 + len(inserted)}"
    assert retry.stdin == (MEMBER_ACCESS[:13] + inserted + MEMBER_ACCESS[13:]).encode("utf-8")


def test_complete_skips_retry_for_ambiguous_package(runner: ToolRunner, backend: FakeBackend) -> None:
    backend.on(GoTool.GO, stdout("go version go1.4 linux/amd64\n"))
    backend.on(GoTool.PACKAGES, stdout("log\ngithub.com/acme/log\n"))
    backend.on(GoTool.COMPLETION, _gocode(lambda _: stdout("[]")))
    text = "package main\n\nfunc main() {\n\tlog.\n}\n"

    suggestions = _orchestrator(runner, autocomplete_unimported_packages=True).complete(
        CompletionRequest(FILENAME, text, 3, 5)
    )

    assert suggestions == []
    assert len(_autocomplete_calls(backend)) == 1


def test_complete_without_unimported_packages_never_retries(runner: ToolRunner, backend: FakeBackend) -> None:
    backend.on(GoTool.COMPLETION, _gocode(lambda _: stdout("[]")))
    assert _orchestrator(runner).complete(CompletionRequest(FILENAME, MEMBER_ACCESS, 3, 9)) == []
    assert len(_autocomplete_calls(backend)) == 1
    assert backend.calls(GoTool.PACKAGES) == []


def test_complete_handles_gocode_failures(
    runner: ToolRunner, backend: FakeBackend, provisioner: RecordingProvisioner
) -> None:
    request = CompletionRequest(FILENAME, "package main\n\nvar x = fmt.\n", 2, 12)

    backend.on(GoTool.COMPLETION, NOT_FOUND)
    assert _orchestrator(runner).complete(request) == []
    assert (GoTool.COMPLETION, False) in provisioner.missing

    backend.on(GoTool.COMPLETION, _gocode(lambda _: stdout("<html>")))
    assert _orchestrator(runner).complete(request) == []

    backend.on(GoTool.COMPLETION, _gocode(lambda _: RUNTIME_ERROR))
    with pytest.raises(ToolExecutionError) as excinfo:
        _orchestrator(runner).complete(request)
    assert excinfo.value.stderr == "boom\n"


def test_daemon_configures_once_under_concurrency(runner: ToolRunner, backend: FakeBackend) -> None:
    started = threading.Event()
    release = threading.Event()

    def slow_set(invocation: ToolInvocation) -> ExecutionResult:
        started.set()
        release.wait(5)
        return ExecutionResult.success(0)

    backend.on(GoTool.COMPLETION, slow_set)
    daemon = DaemonConfigurator(runner, autobuild=True)

    with ThreadPoolExecutor(max_workers=8) as pool:
        futures = [pool.submit(daemon.ensure_configured) for _ in range(8)]
        assert started.wait(5)
        assert not daemon.configured
        release.set()
        for future in futures:
            future.result(timeout=5)

    assert daemon.configured
    assert [call.args for call in backend.calls(GoTool.COMPLETION)] == [
        ("set", "propose-builtins", "true"),
        ("set", "autobuild", "true"),
    ]


def test_daemon_failure_still_counts_as_configured(runner: ToolRunner, backend: FakeBackend) -> None:
    backend.on(GoTool.COMPLETION, RUNTIME_ERROR)
    daemon = DaemonConfigurator(runner, autobuild=False)
    daemon.ensure_configured()
    daemon.ensure_configured()
    assert daemon.configured
    assert len(backend.calls(GoTool.COMPLETION)) == 2
