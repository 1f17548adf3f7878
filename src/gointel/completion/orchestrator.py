# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Coordinate a completion request across gocode and the package catalog."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Final

from ..catalog import PackageCatalog
from ..config import CompletionConfig
from ..errors import MalformedOutputError, ToolExecutionError, ToolLaunchError
from ..execution import FailureKind
from ..imports import compute_import_insertion
from ..models import CompletionKind, CompletionSuggestion, EditorCommand, PackageInfo, Position
from ..parsers import CompletionContext, parse_completion, parse_prelude
from ..parsers.base import decode_text
from ..tools import GoTool, ToolRunner
from ..workspace import current_word, line_at, offset_at
from .daemon import DaemonConfigurator

LOGGER = logging.getLogger(__name__)

IMPORT_COMMAND: Final[str] = "go.import.add"
_LINE_COMMENT: Final[re.Pattern[str]] = re.compile(r"^\s*//")
_NUMERIC_WORD: Final[re.Pattern[str]] = re.compile(r"^\d+$")
# A quote is escaped only by an odd run of backslashes.
_UNESCAPED_QUOTE: Final[re.Pattern[str]] = re.compile(r'(?<!\\)(?:\\\\)*"')
_MEMBER_ACCESS: Final[re.Pattern[str]] = re.compile(r"(\w+)\.$")
# gocode cannot complete while cross compiling; let it use the host platform.
_GOCODE_ENV: Final[dict[str, str]] = {"GOOS": "", "GOARCH": ""}


@dataclass(frozen=True, slots=True)
class CompletionRequest:
    """Completion request coming from the editor."""

    filename: str
    text: str
    line: int
    character: int

    @property
    def position(self) -> Position:
        """Return the cursor position."""

        return Position(self.line, self.character)


def inside_string(line_prefix: str) -> bool:
    """Return ``True`` when an odd number of unescaped quotes precede the cursor."""

    return len(_UNESCAPED_QUOTE.findall(line_prefix)) % 2 == 1


class CompletionOrchestrator:
    """Serve completion requests.

    Owns no per-request state; the daemon latch and the package catalog are
    shared with every concurrent request.
    """

    def __init__(
        self,
        runner: ToolRunner,
        catalog: PackageCatalog,
        daemon: DaemonConfigurator,
        config: CompletionConfig,
    ) -> None:
        self._runner = runner
        self._catalog = catalog
        self._daemon = daemon
        self._config = config

    def complete(self, request: CompletionRequest) -> list[CompletionSuggestion]:
        """Return suggestions for the cursor described by ``request``.

        Args:
            request: Buffer, file name and cursor position.

        Returns:
            list[CompletionSuggestion]: Suggestions, empty inside comments,
            after numeric literals, or when gocode is unavailable.

        Raises:
            ToolLaunchError: If a tool could not be started.
            ToolExecutionError: If gocode exited with an error.
        """

        line_text = line_at(request.text, request.line)
        if _LINE_COMMENT.match(line_text):
            return []
        line_prefix = line_text[: request.character]
        word = current_word(line_text, request.character)
        if _NUMERIC_WORD.match(word):
            return []

        self._prepare(request.filename)
        context = CompletionContext(
            filename=request.filename,
            text=request.text,
            position=request.position,
            line_text=line_text,
            in_string=inside_string(line_prefix),
            use_function_snippets=self._config.use_code_snippets_on_function_suggest,
        )
        offset = offset_at(request.text, request.line, request.character)
        suggestions = self._run_gocode(request.text, offset, context)
        if not self._config.autocomplete_unimported_packages:
            return suggestions

        suggestions.extend(self._package_suggestion(package) for package in self._catalog.matching_packages(word))
        if not suggestions and line_prefix.endswith("."):
            retried = self._complete_with_import(request, line_prefix, offset, context)
            if retried is not None:
                return retried
        return suggestions

    def _prepare(self, filename: str) -> None:
        self._daemon.ensure_configured()
        if self._config.autocomplete_unimported_packages:
            self._catalog.list_packages(exclude_imported=True, current_file=filename)

    def _complete_with_import(
        self,
        request: CompletionRequest,
        line_prefix: str,
        offset: int,
        context: CompletionContext,
    ) -> list[CompletionSuggestion] | None:
        """Re-run gocode once with the package before the dot imported.

        Returns ``None`` when the identifier is not exactly one known package
        or the buffer has no package clause to insert after.
        """

        match = _MEMBER_ACCESS.search(line_prefix)
        if match is None:
            return None
        package_path = self._catalog.package_path_for_name(match.group(1))
        prelude = parse_prelude(request.text)
        if package_path is None or prelude.package_clause is None:
            return None

        insert_at = offset_at(request.text, prelude.package_clause.start + 1, 0)
        inserted = f'import "{package_path}"\n'
        if insert_at == len(request.text) and not request.text.endswith("\n"):
            inserted = "\n" + inserted
        speculative_text = request.text[:insert_at] + inserted + request.text[insert_at:]
        LOGGER.debug("Retrying completion with %s imported", package_path)
        suggestions = self._run_gocode(speculative_text, offset + len(inserted), context)

        edit = compute_import_insertion(prelude, package_path)
        if edit is not None:
            for item in suggestions:
                item.associated_edits = [edit]
        return suggestions

    def _run_gocode(self, text: str, offset: int, context: CompletionContext) -> list[CompletionSuggestion]:
        filename = self._runner.backend.map_path(context.filename)
        result = self._runner.run(
            GoTool.COMPLETION,
            ["-f=json", "autocomplete", filename, f"c{offset}"],
            stdin=text.encode("utf-8"),
            env=_GOCODE_ENV,
        )
        failure = result.failure
        if failure is not None:
            if failure.kind is FailureKind.NOT_FOUND:
                return []
            if failure.kind is FailureKind.LAUNCH_FAILED:
                raise ToolLaunchError(GoTool.COMPLETION.value, failure.message)
            raise ToolExecutionError(GoTool.COMPLETION.value, failure.message, stderr=failure.stderr_text)
        try:
            return parse_completion(decode_text(result, GoTool.COMPLETION.value), context=context)
        except MalformedOutputError as exc:
            LOGGER.warning("Discarding gocode output: %s", exc)
            return []

    @staticmethod
    def _package_suggestion(package: PackageInfo) -> CompletionSuggestion:
        return CompletionSuggestion(
            display_name=package.name,
            kind=CompletionKind.KEYWORD,
            detail=package.path,
            insert_text=package.name,
            documentation="Imports the package",
            command=EditorCommand(title="Import Package", command=IMPORT_COMMAND, arguments=(package.path,)),
        )


__all__ = ["CompletionOrchestrator", "CompletionRequest", "IMPORT_COMMAND", "inside_string"]
