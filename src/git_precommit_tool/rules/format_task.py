from __future__ import annotations
"""File task running a code formatter on each staged file."""

from dataclasses import dataclass
import hashlib
import logging
from pathlib import Path
from typing import Any, Mapping

from git_precommit_tool.domain.entities import RepoEntry
from git_precommit_tool.domain.results import TaskResult
from git_precommit_tool.domain.tasks import FileTask
from git_precommit_tool.rules.command_runtime import CommandRunner
from git_precommit_tool.rules.options import (
    normalize_extensions,
    parse_command,
    parse_string_list,
    reject_unknown_options,
)


LOGGER = logging.getLogger(__name__)

DEFAULT_FORMAT_COMMAND = ("ruff", "format")
DEFAULT_FORMAT_EXTENSIONS = (".py", ".pyi")


@dataclass(frozen=True, slots=True)
class FormatConfig:
    command: tuple[str, ...] = DEFAULT_FORMAT_COMMAND
    extensions: tuple[str, ...] = DEFAULT_FORMAT_EXTENSIONS

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> FormatConfig:
        reject_unknown_options("format", options, {"command", "extensions"})
        return cls(
            command=parse_command(options.get("command", DEFAULT_FORMAT_COMMAND), "format.command"),
            extensions=normalize_extensions(
                parse_string_list(options.get("extensions", DEFAULT_FORMAT_EXTENSIONS), "format.extensions")
            ),
        )


class FormatFileTask(FileTask):
    """Format one staged file in place.

    The formatter is invoked as `<command> <file>` from the repository root.
    A changed file digest means the formatter fixed something; a non-zero exit
    code means the file could not be formatted (e.g. a syntax error).
    """

    def __init__(self, runner: CommandRunner, config: FormatConfig | None = None) -> None:
        self._runner = runner
        self._config = config or FormatConfig()

    @property
    def task_name(self) -> str:
        return "format"

    def can_process(self, entry: RepoEntry) -> bool:
        return entry.file.suffix.lower() in self._config.extensions

    def __call__(self, entry: RepoEntry) -> TaskResult:
        before = _digest(entry.file)
        exit_code, stdout, stderr = self._runner.run(
            [*self._config.command, str(entry.file)],
            cwd=entry.git_root,
        )
        if exit_code != 0:
            LOGGER.error(
                "formatter failed",
                extra={
                    "event": "task.format.failed",
                    "path": str(entry.file),
                    "exit_code": exit_code,
                    "details": (stderr or stdout).strip(),
                },
            )
            return TaskResult.REJECTED

        if _digest(entry.file) != before:
            LOGGER.debug("file reformatted", extra={"event": "task.format.modified", "path": str(entry.file)})
            return TaskResult.MODIFIED
        return TaskResult.ACCEPTED


def _digest(path: Path) -> str:
    return hashlib.sha256(path.read_bytes()).hexdigest()
