from __future__ import annotations

from pathlib import Path

from git_precommit_tool.domain.ports import FileSystemPort


class LocalFileSystemAdapter(FileSystemPort):
    def is_file(self, path: Path) -> bool:
        return path.is_file()
