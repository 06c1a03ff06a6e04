from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from fakes import FakeRunner, make_entry
from git_precommit_tool.domain.results import TaskResult
from git_precommit_tool.rules.outdated_task import (
    OutdatedConfig,
    OutdatedPackage,
    OutdatedRepoTask,
    parse_outdated_packages,
)

LOGGER_NAME = "git_precommit_tool.rules.outdated_task"


def _report(*packages: tuple[str, str, str]) -> str:
    return json.dumps(
        [
            {"name": name, "version": version, "latest_version": latest, "latest_filetype": "wheel"}
            for name, version, latest in packages
        ]
    )


def _task(root: Path, runner: FakeRunner, **options) -> OutdatedRepoTask:
    return OutdatedRepoTask(runner, OutdatedConfig.from_mapping(options), project_dir=root)


def test_task_metadata(repo_root: Path) -> None:
    task = _task(repo_root, FakeRunner())

    assert task.task_name == "outdated"
    assert task.call_for_empty_entries is True
    assert task.can_process(make_entry(repo_root, "pyproject.toml")) is False


@pytest.mark.parametrize(
    ("version", "latest", "expected"),
    [
        ("1.2.3", "2.0.0", "major"),
        ("1.2.3", "1.3.0", "minor"),
        ("1.2.3", "1.2.4", "patch"),
        ("1.2", "1.2.1", "patch"),
        ("1.2.3", "1.2.3.post1", "any"),
        ("1.0.0rc1", "1.0.0", "any"),
        ("unknown", "1.0", "any"),
    ],
)
def test_update_level(version: str, latest: str, expected: str) -> None:
    assert OutdatedPackage("pkg", version, latest).update_level == expected


def test_up_to_date_environment_is_accepted(repo_root: Path) -> None:
    runner = FakeRunner(stdout="[]")

    assert _task(repo_root, runner)([]) is TaskResult.ACCEPTED
    assert runner.calls == [(["pip", "list", "--outdated", "--format", "json"], repo_root)]


def test_any_update_rejects_by_default(repo_root: Path, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger=LOGGER_NAME)
    runner = FakeRunner(stdout=_report(("requests", "2.31.0", "2.31.1")))

    assert _task(repo_root, runner)([]) is TaskResult.REJECTED
    assert caplog.messages == [
        "  Required: requests: 2.31.0 -> 2.31.1",
        "1 required update(s) found.",
    ]


def test_updates_below_the_configured_level_are_optional(
    repo_root: Path, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.INFO, logger=LOGGER_NAME)
    runner = FakeRunner(stdout=_report(("requests", "2.31.0", "2.32.0"), ("idna", "3.6", "3.7")))

    assert _task(repo_root, runner, level="major")([]) is TaskResult.ACCEPTED
    assert caplog.messages[-1] == "No required updates found."
    assert [record.blocking for record in caplog.records[:-1]] == [False, False]


def test_allowed_packages_never_reject(repo_root: Path) -> None:
    runner = FakeRunner(stdout=_report(("Typing_Extensions", "4.0.0", "5.0.0")))

    assert _task(repo_root, runner, allowed=["typing-extensions"])([]) is TaskResult.ACCEPTED


def test_failing_command_is_rejected(repo_root: Path, caplog: pytest.LogCaptureFixture) -> None:
    runner = FakeRunner(exit_code=1, stderr="pip: command not usable")

    assert _task(repo_root, runner)([]) is TaskResult.REJECTED
    assert caplog.records[-1].event == "task.outdated.failed"


def test_parse_outdated_packages_skips_malformed_items() -> None:
    output = 'note\n[{"name": "a", "version": "1", "latest_version": "2"}, {"name": "b"}, 3]'

    assert parse_outdated_packages(output) == [OutdatedPackage("a", "1", "2")]
    assert parse_outdated_packages("") == []
    with pytest.raises(RuntimeError, match="Cannot parse dependency report"):
        parse_outdated_packages("[not json")


@pytest.mark.parametrize(
    ("options", "message"),
    [
        ({"level": "huge"}, "outdated.level"),
        ({"allowed": "requests"}, "outdated.allowed"),
        ({"strict": True}, "strict"),
    ],
)
def test_invalid_options_are_rejected(options: dict, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        OutdatedConfig.from_mapping(options)
