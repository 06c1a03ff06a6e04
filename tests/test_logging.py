from __future__ import annotations

import json
import logging

import pytest

from git_precommit_tool.adapters.status.logging_status_reporter import LoggingStatusReporter
from git_precommit_tool.domain.entities import TaskStatus
from git_precommit_tool.logging_utils import ConsoleLogFormatter, JsonLogFormatter


def _record(message: str, level: int = logging.INFO, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord("test", level, __file__, 1, message, None, None)
    record.__dict__.update(extra)
    return record


def test_json_formatter_includes_extra_fields() -> None:
    payload = json.loads(JsonLogFormatter().format(_record("staging file", event="git.add.start", path="a.py")))

    assert payload["message"] == "staging file"
    assert payload["level"] == "INFO"
    assert payload["event"] == "git.add.start"
    assert payload["path"] == "a.py"


def test_console_formatter_renders_status_lines() -> None:
    formatter = ConsoleLogFormatter()

    assert formatter.format(_record("Fixed up a.py", event="hooks.status", status="has_changes")) == "[FIX ] Fixed up a.py"
    assert (
        formatter.format(_record("Scanning a.py...", logging.DEBUG, event="hooks.status", status="scanning", detail="[format]"))
        == "[....] Scanning a.py... [format]"
    )
    assert formatter.format(_record("3 issue(s) found.")) == "3 issue(s) found."
    assert formatter.format(_record("git command failed", logging.ERROR, event="git.command.error")) == (
        "ERROR: git command failed"
    )


def test_status_reporter_logs_transitions(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("tests.status")
    caplog.set_level(logging.DEBUG, logger="tests.status")
    reporter = LoggingStatusReporter(logger)

    reporter.update_status(message="Scanning a.py...", status=TaskStatus.SCANNING)
    reporter.update_status(detail="[format]")
    reporter.update_status(message="Rejected file a.py", status=TaskStatus.REJECTED, clear=True)
    reporter.complete_status()

    assert [record.getMessage() for record in caplog.records] == [
        "Scanning a.py...",
        "Scanning a.py...",
        "Rejected file a.py",
    ]
    assert caplog.records[1].detail == "[format]"
    assert caplog.records[1].status == "scanning"
    assert caplog.records[2].levelno == logging.ERROR
    assert caplog.records[2].status == "rejected"
