from __future__ import annotations
"""Repository task running a static analyzer over the scanned project."""

from dataclasses import dataclass
import json
import logging
from pathlib import Path
from typing import Any, Mapping, Sequence

from git_precommit_tool.domain.entities import RepoEntry
from git_precommit_tool.domain.results import TaskResult
from git_precommit_tool.domain.tasks import RepoTask
from git_precommit_tool.rules.command_runtime import CommandRunner
from git_precommit_tool.rules.options import (
    normalize_extensions,
    parse_bool,
    parse_command,
    parse_string_list,
    reject_unknown_options,
)


LOGGER = logging.getLogger(__name__)

DEFAULT_ANALYSIS_COMMAND = ("ruff", "check", "--output-format", "json")
DEFAULT_ANALYSIS_EXTENSIONS = (".py", ".pyi")
PROJECT_FILES = ("pyproject.toml",)


@dataclass(frozen=True, slots=True)
class AnalysisConfig:
    command: tuple[str, ...] = DEFAULT_ANALYSIS_COMMAND
    extensions: tuple[str, ...] = DEFAULT_ANALYSIS_EXTENSIONS
    ignore_unstaged_files: bool = False

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> AnalysisConfig:
        reject_unknown_options("analyze", options, {"command", "extensions", "ignore-unstaged-files"})
        return cls(
            command=parse_command(options.get("command", DEFAULT_ANALYSIS_COMMAND), "analyze.command"),
            extensions=normalize_extensions(
                parse_string_list(options.get("extensions", DEFAULT_ANALYSIS_EXTENSIONS), "analyze.extensions")
            ),
            ignore_unstaged_files=parse_bool(
                options.get("ignore-unstaged-files", False),
                "analyze.ignore-unstaged-files",
            ),
        )


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """One finding reported by the analyzer."""

    filename: str
    row: int
    column: int
    message: str
    code: str | None = None

    @classmethod
    def from_json(cls, payload: object) -> Diagnostic | None:
        if not isinstance(payload, dict):
            return None
        location = payload.get("location") or {}
        filename = payload.get("filename")
        message = payload.get("message")
        if not isinstance(filename, str) or not isinstance(message, str) or not isinstance(location, dict):
            return None
        code = payload.get("code")
        return cls(
            filename=filename,
            row=int(location.get("row") or 0),
            column=int(location.get("column") or 0),
            message=message,
            code=code if isinstance(code, str) else None,
        )


class AnalysisRepoTask(RepoTask):
    """Analyze the whole project once and judge the staged files.

    The analyzer decides severity through its exit code: zero accepts, non-zero
    rejects. Every reported diagnostic is logged. With `ignore_unstaged_files`
    the task only rejects if at least one diagnostic concerns a staged entry.
    """

    def __init__(
        self,
        runner: CommandRunner,
        config: AnalysisConfig | None = None,
        *,
        project_dir: Path | None = None,
    ) -> None:
        self._runner = runner
        self._config = config or AnalysisConfig()
        self._project_dir = (project_dir or Path.cwd()).resolve()

    @property
    def task_name(self) -> str:
        return "analyze"

    @property
    def call_for_empty_entries(self) -> bool:
        return True

    def can_process(self, entry: RepoEntry) -> bool:
        if entry.file.suffix.lower() in self._config.extensions:
            return True
        return entry.relative_path(self._project_dir) in PROJECT_FILES

    def __call__(self, entries: Sequence[RepoEntry]) -> TaskResult:
        exit_code, stdout, stderr = self._runner.run(self._config.command, cwd=self._project_dir)
        diagnostics = parse_diagnostics(stdout)
        for diagnostic in diagnostics:
            LOGGER.info(
                "  %s - %s:%d:%d - %s",
                diagnostic.code or "error",
                self._display(diagnostic),
                diagnostic.row,
                diagnostic.column,
                diagnostic.message,
                extra={"event": "task.analyze.diagnostic", "code": diagnostic.code},
            )

        if exit_code == 0:
            LOGGER.info("%d issue(s) found.", len(diagnostics), extra={"event": "task.analyze.summary"})
            return TaskResult.ACCEPTED

        if not diagnostics:
            LOGGER.error(
                "analyzer failed without reporting diagnostics",
                extra={
                    "event": "task.analyze.failed",
                    "exit_code": exit_code,
                    "details": (stderr or stdout).strip(),
                },
            )
            return TaskResult.REJECTED

        if self._config.ignore_unstaged_files:
            staged_files = {entry.file.resolve() for entry in entries}
            staged_count = sum(1 for diagnostic in diagnostics if self._resolve(diagnostic) in staged_files)
            if staged_count == 0:
                LOGGER.info(
                    "%d issue(s) found, but none are in staged files.",
                    len(diagnostics),
                    extra={"event": "task.analyze.summary"},
                )
                return TaskResult.ACCEPTED
            LOGGER.info(
                "%d issue(s) found, %d of those are in unstaged files.",
                len(diagnostics),
                len(diagnostics) - staged_count,
                extra={"event": "task.analyze.summary", "staged": staged_count},
            )
            return TaskResult.REJECTED

        LOGGER.info("%d issue(s) found.", len(diagnostics), extra={"event": "task.analyze.summary"})
        return TaskResult.REJECTED

    def _resolve(self, diagnostic: Diagnostic) -> Path:
        return (self._project_dir / diagnostic.filename).resolve()

    def _display(self, diagnostic: Diagnostic) -> str:
        try:
            return self._resolve(diagnostic).relative_to(self._project_dir).as_posix()
        except ValueError:
            return diagnostic.filename


def parse_diagnostics(output: str) -> list[Diagnostic]:
    """Extract the JSON diagnostics list from analyzer output, ignoring noise."""
    candidates = [output]
    start = output.find("[")
    if start > 0:
        candidates.append(output[start:])
    candidates.extend(output.splitlines())

    for candidate in candidates:
        candidate = candidate.strip()
        if not candidate.startswith("["):
            continue
        try:
            payload = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if not isinstance(payload, list):
            continue
        diagnostics = [Diagnostic.from_json(item) for item in payload]
        return [diagnostic for diagnostic in diagnostics if diagnostic is not None]
    return []
