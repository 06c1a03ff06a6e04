from __future__ import annotations

import logging

from git_precommit_tool.domain.entities import TaskStatus
from git_precommit_tool.domain.ports import StatusReporterPort


class LoggingStatusReporter(StatusReporterPort):
    """Publish status transitions as structured log records.

    The last message is remembered so task detail updates (e.g. `[format]`)
    are reported together with the entry or task they belong to.
    """

    _LEVEL_BY_STATUS = {
        TaskStatus.SCANNING: logging.DEBUG,
        TaskStatus.CLEAN: logging.INFO,
        TaskStatus.HAS_CHANGES: logging.INFO,
        TaskStatus.HAS_UNSTAGED_CHANGES: logging.WARNING,
        TaskStatus.REJECTED: logging.ERROR,
    }

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger(__name__)
        self._message: str | None = None
        self._status: TaskStatus | None = None

    def update_status(
        self,
        *,
        message: str | None = None,
        status: TaskStatus | None = None,
        detail: str | None = None,
        clear: bool = False,
    ) -> None:
        if message is not None:
            self._message = message
        if status is not None:
            self._status = status

        level = self._LEVEL_BY_STATUS.get(self._status, logging.INFO) if status is not None else logging.DEBUG
        extra: dict[str, object] = {
            "event": "hooks.status",
            "status": self._status.value if self._status else None,
        }
        if detail is not None and not clear:
            extra["detail"] = detail
        self._logger.log(level, self._message or "", extra=extra)

    def complete_status(self) -> None:
        self._message = None
        self._status = None
