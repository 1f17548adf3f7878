# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

from __future__ import annotations

from pathlib import Path

import pytest
from helpers.fakes import RUNTIME_ERROR, FakeBackend, RecordingProvisioner, gocode_output, outline_output, stdout
from typer.testing import CliRunner

from gointel import cli
from gointel.config import IntegrationConfig
from gointel.execution import ExecutionResult, ToolInvocation
from gointel.session import GoToolSession
from gointel.tools import GoTool

BARE = "package main\n\nfunc main() {}\n"


@pytest.fixture
def cli_backend(monkeypatch: pytest.MonkeyPatch) -> FakeBackend:
    fake = FakeBackend()

    def build(config: IntegrationConfig) -> GoToolSession:
        return GoToolSession.from_config(config, backend=fake, provisioner=RecordingProvisioner())

    monkeypatch.setattr(cli, "build_session", build)
    monkeypatch.delenv("GOINTEL_BACKEND", raising=False)
    return fake


def _go_file(tmp_path: Path, text: str = BARE) -> Path:
    path = tmp_path / "main.go"
    path.write_text(text, encoding="utf-8")
    return path


def test_packages_command_lists_paths(cli_backend: FakeBackend) -> None:
    cli_backend.on(GoTool.PACKAGES, stdout("os\nfmt\n"))
    result = CliRunner().invoke(cli.app, ["packages"])
    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == ["fmt", "os"]


def test_add_import_prints_updated_buffer(cli_backend: FakeBackend, tmp_path: Path) -> None:
    path = _go_file(tmp_path)
    result = CliRunner().invoke(cli.app, ["add-import", str(path), "os"])
    assert result.exit_code == 0, result.output
    assert result.output == 'package main\n\nimport (\n\t"os"\n)\n\nfunc main() {}\n'
    assert path.read_text(encoding="utf-8") == BARE


def test_add_import_write_updates_file(cli_backend: FakeBackend, tmp_path: Path) -> None:
    path = _go_file(tmp_path, 'package main\n\nimport "fmt"\n')
    result = CliRunner().invoke(cli.app, ["add-import", str(path), "os", "--write"])
    assert result.exit_code == 0, result.output
    assert path.read_text(encoding="utf-8") == 'package main\n\nimport "fmt"\nimport "os"\n'


def test_add_import_without_package_clause_fails(cli_backend: FakeBackend, tmp_path: Path) -> None:
    path = _go_file(tmp_path, "// nothing here\n")
    result = CliRunner().invoke(cli.app, ["add-import", str(path), "os"])
    assert result.exit_code == 1


def test_outline_command_prints_symbols(cli_backend: FakeBackend, tmp_path: Path) -> None:
    cli_backend.on(GoTool.OUTLINE, outline_output({"label": "Serve", "type": "function", "start": 20, "end": 60}))
    result = CliRunner().invoke(cli.app, ["outline", str(_go_file(tmp_path))])
    assert result.exit_code == 0, result.output
    assert "Serve" in result.output
    assert "function" in result.output


def test_complete_command_prints_suggestions(cli_backend: FakeBackend, tmp_path: Path) -> None:
    def gocode(invocation: ToolInvocation) -> ExecutionResult:
        if invocation.args[0] == "set":
            return ExecutionResult.success(0)
        return gocode_output(("func", "Println", "func(a ...any)"))

    cli_backend.on(GoTool.COMPLETION, gocode)
    path = _go_file(tmp_path, "package main\n\nfunc main() {\n\tfmt.P\n}\n")
    result = CliRunner().invoke(cli.app, ["complete", str(path), "3", "6"])
    assert result.exit_code == 0, result.output
    assert "Println" in result.output


def test_rename_command_reports_tool_errors(cli_backend: FakeBackend, tmp_path: Path) -> None:
    cli_backend.on(GoTool.RENAME, RUNTIME_ERROR)
    result = CliRunner().invoke(cli.app, ["rename", str(_go_file(tmp_path)), "2", "6", "run"])
    assert result.exit_code == 1
    assert "Cannot rename" in " ".join(result.output.split())


def test_rename_command_succeeds(cli_backend: FakeBackend, tmp_path: Path) -> None:
    result = CliRunner().invoke(cli.app, ["rename", str(_go_file(tmp_path)), "2", "6", "run"])
    assert result.exit_code == 0, result.output
    assert "Renamed to run" in result.output


def test_invalid_config_exits_with_error(cli_backend: FakeBackend, tmp_path: Path) -> None:
    config = tmp_path / "gointel.toml"
    config.write_text("[execution]\nworkers = 0\n", encoding="utf-8")
    result = CliRunner().invoke(cli.app, ["--config", str(config), "packages"])
    assert result.exit_code == 1
    assert cli_backend.invocations == []
