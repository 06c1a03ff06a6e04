from __future__ import annotations
"""Hexagonal architecture port interfaces.

Core use cases depend only on these abstractions. Adapters provide concrete
implementations for git, filesystem, configuration, status output, etc.
"""

from abc import ABC, abstractmethod
from pathlib import Path
import re
from typing import Any

from .entities import TaskStatus
from .tasks import TaskBase


class GitClientPort(ABC):
    """Local git queries and index updates used by the hooks run."""

    @abstractmethod
    def resolve_root(self, cwd: Path) -> Path:
        """Return the repository root enclosing `cwd`, symlinks resolved."""
        raise NotImplementedError

    @abstractmethod
    def list_changed_files(self, cwd: Path) -> list[str]:
        """List paths with unstaged working tree modifications (root-relative)."""
        raise NotImplementedError

    @abstractmethod
    def list_staged_files(self, cwd: Path) -> list[str]:
        """List paths staged for commit (root-relative), in git's order."""
        raise NotImplementedError

    @abstractmethod
    def add(self, path: Path, cwd: Path) -> None:
        """Stage the current content of `path`."""
        raise NotImplementedError


class FileSystemPort(ABC):
    """Filesystem operations abstracted for testability and portability."""

    @abstractmethod
    def is_file(self, path: Path) -> bool:
        """Return whether `path` exists and is a regular file."""
        raise NotImplementedError


class ConfigPort(ABC):
    """Project configuration, loaded once per run before collection."""

    @abstractmethod
    def load_global_config(self, config_file: Path | None = None) -> bool:
        """Load the configuration and return whether the tool is enabled."""
        raise NotImplementedError

    @abstractmethod
    def load_task_config(self, task_name: str, *, enabled_by_default: bool = True) -> dict[str, Any] | None:
        """Return task options, or `None` when the task is disabled."""
        raise NotImplementedError

    @abstractmethod
    def load_exclude_patterns(self) -> list[re.Pattern[str]]:
        """Return the compiled exclude patterns."""
        raise NotImplementedError


class TaskLoaderPort(ABC):
    """Task registry discovery."""

    @abstractmethod
    def load_tasks(self) -> list[TaskBase]:
        """Return enabled tasks in registration order."""
        raise NotImplementedError


class StatusReporterPort(ABC):
    """Receiver of per-entry and per-task status transitions."""

    @abstractmethod
    def update_status(
        self,
        *,
        message: str | None = None,
        status: TaskStatus | None = None,
        detail: str | None = None,
        clear: bool = False,
    ) -> None:
        """Publish a status transition for the current entry or task."""
        raise NotImplementedError

    @abstractmethod
    def complete_status(self) -> None:
        """Mark the current entry or task as finished."""
        raise NotImplementedError
