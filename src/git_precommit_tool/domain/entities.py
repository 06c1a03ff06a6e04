from __future__ import annotations
"""Core domain entities shared by use cases and tasks.

These data models are intentionally framework-agnostic and can be reused across
different adapters (CLI, tests, future APIs).
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


@dataclass(frozen=True, slots=True)
class RepoEntry:
    """One staged file collected for a single hooks run.

    Attributes:
        file: Absolute path of the staged file. It existed at collection time.
        partially_staged: Whether the working tree holds further unstaged edits
            of the same file on top of the staged content.
        git_root: Absolute repository root with symbolic links resolved.
    """

    file: Path
    partially_staged: bool
    git_root: Path

    def relative_path(self, base: Path) -> str:
        """Return the file path relative to `base` when possible (posix form)."""
        try:
            return self.file.relative_to(base).as_posix()
        except ValueError:
            return self.file.as_posix()


@dataclass(frozen=True, slots=True)
class HooksConfig:
    """Run parameters supplied by the caller.

    Attributes:
        continue_on_rejected: Keep processing after a task rejected something.
            The run still resolves to `HookResult.REJECTED` in that case.
        config_file: Optional TOML file holding the configuration as root level
            keys. When omitted, the `[tool.precommit-gate]` table of the
            scanned directory's `pyproject.toml` is used.
    """

    continue_on_rejected: bool = False
    config_file: Path | None = None


class TaskStatus(Enum):
    """Status values published through the status reporter."""

    SCANNING = "scanning"
    CLEAN = "clean"
    HAS_CHANGES = "has_changes"
    HAS_UNSTAGED_CHANGES = "has_unstaged_changes"
    REJECTED = "rejected"
