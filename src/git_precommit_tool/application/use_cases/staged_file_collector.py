from __future__ import annotations
"""Application use case deriving the staged working set from git."""

from dataclasses import dataclass, field
import logging
from pathlib import Path
import re
from typing import Iterator, Sequence

from git_precommit_tool.domain.entities import RepoEntry
from git_precommit_tool.domain.ports import FileSystemPort, GitClientPort


LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class StagedFileCollector:
    """Collect staged files below `cwd` as `RepoEntry` objects.

    Responsibilities:
    - query changed (unstaged) and staged paths from `GitClientPort`
    - keep only paths inside the scanned directory `cwd`
    - drop files deleted after staging and files matching an exclude pattern
    - flag entries that are also changed in the working tree as partially staged
    """

    git_client: GitClientPort
    filesystem: FileSystemPort
    cwd: Path
    exclude_patterns: Sequence[re.Pattern[str]] = field(default_factory=tuple)

    def collect(self) -> Iterator[RepoEntry]:
        """Yield entries lazily, in the order git reported the staged paths.

        The iterator is single-pass; call `collect()` again for a fresh run.
        """
        cwd = self.cwd.resolve()
        git_root = self.git_client.resolve_root(cwd)
        changed = set(self._scoped_paths(git_root, cwd, self.git_client.list_changed_files(cwd)))
        staged = self._scoped_paths(git_root, cwd, self.git_client.list_staged_files(cwd))

        for relative in staged:
            file = cwd / relative
            if not self.filesystem.is_file(file):
                LOGGER.debug(
                    "staged file skipped: missing on disk",
                    extra={"event": "collector.entry.skip_missing", "path": relative},
                )
                continue
            if any(pattern.fullmatch(relative) for pattern in self.exclude_patterns):
                LOGGER.debug(
                    "staged file skipped: excluded",
                    extra={"event": "collector.entry.skip_excluded", "path": relative},
                )
                continue
            yield RepoEntry(
                file=file,
                partially_staged=relative in changed,
                git_root=git_root,
            )

    @staticmethod
    def _scoped_paths(git_root: Path, cwd: Path, paths: Sequence[str]) -> Iterator[str]:
        """Map root-relative git paths to cwd-relative posix paths inside `cwd`."""
        for path in paths:
            absolute = git_root / path
            try:
                yield absolute.relative_to(cwd).as_posix()
            except ValueError:
                continue
