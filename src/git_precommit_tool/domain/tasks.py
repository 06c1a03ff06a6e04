from __future__ import annotations
"""Domain task contracts and capability filters."""

from abc import ABC, abstractmethod
from typing import Iterable, Sequence

from .entities import RepoEntry
from .results import TaskResult


class TaskBase(ABC):
    """Common interface of every pluggable quality-gate task.

    Implementers should:
    - expose a stable `task_name` used in logs and configuration,
    - decline entries they do not handle through `can_process`,
    - apply fixes themselves and report them as `TaskResult.MODIFIED`.
    """

    @property
    @abstractmethod
    def task_name(self) -> str:
        """Stable task identifier used in status messages and configuration."""
        raise NotImplementedError

    @abstractmethod
    def can_process(self, entry: RepoEntry) -> bool:
        """Return whether the task wants to see `entry`."""
        raise NotImplementedError


class FileTask(TaskBase):
    """Task invoked once per staged entry."""

    @abstractmethod
    def __call__(self, entry: RepoEntry) -> TaskResult:
        """Check (and possibly fix in place) a single entry.

        Args:
            entry: Staged entry accepted by `can_process`.

        Returns:
            TaskResult verdict for this entry.
        """
        raise NotImplementedError


class RepoTask(TaskBase):
    """Task invoked once per run with every entry it accepts."""

    @property
    def call_for_empty_entries(self) -> bool:
        """Whether to run even if no staged entry qualifies."""
        return False

    @abstractmethod
    def __call__(self, entries: Sequence[RepoEntry]) -> TaskResult:
        """Check the batch of accepted entries and return one verdict."""
        raise NotImplementedError


def file_tasks(tasks: Iterable[TaskBase]) -> list[FileTask]:
    """Select file-scoped tasks, keeping registration order."""
    return [task for task in tasks if isinstance(task, FileTask)]


def repo_tasks(tasks: Iterable[TaskBase]) -> list[RepoTask]:
    """Select repository-scoped tasks, keeping registration order."""
    return [task for task in tasks if isinstance(task, RepoTask)]
