from __future__ import annotations
"""Repository task reporting outdated installed dependencies."""

from dataclasses import dataclass
import json
import logging
from pathlib import Path
import re
from typing import Any, Mapping, Sequence

from git_precommit_tool.domain.entities import RepoEntry
from git_precommit_tool.domain.results import TaskResult
from git_precommit_tool.domain.tasks import RepoTask
from git_precommit_tool.rules.command_runtime import CommandRunner
from git_precommit_tool.rules.options import parse_command, parse_string_list, reject_unknown_options


LOGGER = logging.getLogger(__name__)

DEFAULT_OUTDATED_COMMAND = ("pip", "list", "--outdated", "--format", "json")

# Most to least significant; a level rejects every update at or above it.
UPDATE_LEVELS = ("major", "minor", "patch", "any")

_RELEASE_PATTERN = re.compile(r"v?(\d+(?:\.\d+)*)")


@dataclass(frozen=True, slots=True)
class OutdatedConfig:
    command: tuple[str, ...] = DEFAULT_OUTDATED_COMMAND
    level: str = "any"
    allowed: frozenset[str] = frozenset()

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> OutdatedConfig:
        reject_unknown_options("outdated", options, {"command", "level", "allowed"})
        level = options.get("level", "any")
        if level not in UPDATE_LEVELS:
            raise ValueError(f"'outdated.level' must be one of: {', '.join(UPDATE_LEVELS)}")
        allowed = parse_string_list(options.get("allowed", []), "outdated.allowed")
        return cls(
            command=parse_command(options.get("command", DEFAULT_OUTDATED_COMMAND), "outdated.command"),
            level=level,
            allowed=frozenset(normalize_package_name(name) for name in allowed),
        )


@dataclass(frozen=True, slots=True)
class OutdatedPackage:
    name: str
    version: str
    latest_version: str

    @property
    def update_level(self) -> str:
        current = _release(self.version)
        latest = _release(self.latest_version)
        if current is None or latest is None:
            return "any"
        for level, (old, new) in zip(UPDATE_LEVELS, zip(current, latest)):
            if old != new:
                return level
        return "any"


class OutdatedRepoTask(RepoTask):
    """Check the environment for dependency updates once per run.

    No staged file is processed; the task only runs because it is called for
    empty entry lists. Packages listed in `allowed` are reported but never
    reject the commit.
    """

    def __init__(
        self,
        runner: CommandRunner,
        config: OutdatedConfig | None = None,
        *,
        project_dir: Path | None = None,
    ) -> None:
        self._runner = runner
        self._config = config or OutdatedConfig()
        self._project_dir = (project_dir or Path.cwd()).resolve()

    @property
    def task_name(self) -> str:
        return "outdated"

    @property
    def call_for_empty_entries(self) -> bool:
        return True

    def can_process(self, entry: RepoEntry) -> bool:
        return False

    def __call__(self, entries: Sequence[RepoEntry]) -> TaskResult:
        exit_code, stdout, stderr = self._runner.run(self._config.command, cwd=self._project_dir)
        if exit_code != 0:
            LOGGER.error(
                "dependency check failed",
                extra={"event": "task.outdated.failed", "exit_code": exit_code, "details": (stderr or stdout).strip()},
            )
            return TaskResult.REJECTED

        threshold = UPDATE_LEVELS.index(self._config.level)
        rejected = 0
        packages = parse_outdated_packages(stdout)
        for package in packages:
            level = package.update_level
            blocking = (
                UPDATE_LEVELS.index(level) <= threshold
                and normalize_package_name(package.name) not in self._config.allowed
            )
            rejected += blocking
            LOGGER.info(
                "  %s %s: %s -> %s",
                "Required:" if blocking else "Optional:",
                package.name,
                package.version,
                package.latest_version,
                extra={"event": "task.outdated.package", "level": level, "blocking": blocking},
            )

        if rejected:
            LOGGER.info(
                "%d required update(s) found.",
                rejected,
                extra={"event": "task.outdated.summary", "outdated": len(packages)},
            )
            return TaskResult.REJECTED

        LOGGER.info(
            "No required updates found.",
            extra={"event": "task.outdated.summary", "outdated": len(packages)},
        )
        return TaskResult.ACCEPTED


def parse_outdated_packages(output: str) -> list[OutdatedPackage]:
    start = output.find("[")
    if start < 0:
        return []
    try:
        payload = json.loads(output[start:])
    except json.JSONDecodeError as error:
        raise RuntimeError(f"Cannot parse dependency report: {error}") from error
    if not isinstance(payload, list):
        raise RuntimeError("Cannot parse dependency report: expected a JSON list")

    packages: list[OutdatedPackage] = []
    for item in payload:
        if not isinstance(item, dict):
            continue
        name, version, latest = item.get("name"), item.get("version"), item.get("latest_version")
        if isinstance(name, str) and isinstance(version, str) and isinstance(latest, str):
            packages.append(OutdatedPackage(name=name, version=version, latest_version=latest))
    return packages


def normalize_package_name(name: str) -> str:
    return re.sub(r"[-_.]+", "-", name).lower()


def _release(version: str) -> tuple[int, int, int] | None:
    match = _RELEASE_PATTERN.match(version.strip())
    if match is None:
        return None
    parts = [int(part) for part in match.group(1).split(".")]
    parts.extend([0] * (3 - len(parts)))
    return parts[0], parts[1], parts[2]
