"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture()
def repo_root(tmp_path: Path) -> Path:
    """Resolved temporary directory standing in for a git work tree."""
    return tmp_path.resolve()


@pytest.fixture()
def write_files(repo_root: Path):
    """Create files (relative to `repo_root`) with placeholder content."""

    def _write(*names: str) -> list[Path]:
        paths = []
        for name in names:
            path = repo_root / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(f"# {name}\n", encoding="utf-8")
            paths.append(path)
        return paths

    return _write
