from __future__ import annotations

from pathlib import Path
import re

import pytest

from fakes import FakeGitClient
from git_precommit_tool.adapters.filesystem.local_filesystem import LocalFileSystemAdapter
from git_precommit_tool.application.use_cases.staged_file_collector import StagedFileCollector


def _collector(git: FakeGitClient, cwd: Path, *patterns: str) -> StagedFileCollector:
    return StagedFileCollector(
        git_client=git,
        filesystem=LocalFileSystemAdapter(),
        cwd=cwd,
        exclude_patterns=[re.compile(pattern) for pattern in patterns],
    )


def test_collect_preserves_staged_order_and_flags_partially_staged(repo_root: Path, write_files) -> None:
    write_files("b.py", "a.py", "lib/c.py")
    git = FakeGitClient(repo_root, staged=["b.py", "a.py", "lib/c.py"], changed=["a.py", "unrelated.py"])

    entries = list(_collector(git, repo_root).collect())

    assert [entry.file for entry in entries] == [repo_root / "b.py", repo_root / "a.py", repo_root / "lib/c.py"]
    assert [entry.partially_staged for entry in entries] == [False, True, False]
    assert all(entry.git_root == repo_root for entry in entries)


def test_collect_skips_files_deleted_after_staging(repo_root: Path, write_files) -> None:
    write_files("kept.py")
    (repo_root / "folder.py").mkdir()
    git = FakeGitClient(repo_root, staged=["deleted.py", "kept.py", "folder.py"])

    entries = list(_collector(git, repo_root).collect())

    assert [entry.file.name for entry in entries] == ["kept.py"]


def test_collect_drops_paths_fully_matching_exclude_patterns(repo_root: Path, write_files) -> None:
    write_files("gen/model.py", "x.py", "src/x.py")
    git = FakeGitClient(repo_root, staged=["gen/model.py", "x.py", "src/x.py"])

    entries = list(_collector(git, repo_root, r"gen/.*", r"x").collect())

    assert [entry.relative_path(repo_root) for entry in entries] == ["x.py", "src/x.py"]


def test_collect_only_yields_files_below_scanned_subdirectory(repo_root: Path, write_files) -> None:
    write_files("pkg/a.py", "pkg/sub/b.py", "other/c.py", "top.py")
    git = FakeGitClient(
        repo_root,
        staged=["top.py", "pkg/a.py", "other/c.py", "pkg/sub/b.py"],
        changed=["pkg/sub/b.py"],
    )
    cwd = repo_root / "pkg"

    entries = list(_collector(git, cwd, r"sub/.*").collect())

    assert [entry.file for entry in entries] == [cwd / "a.py"]
    assert entries[0].git_root == repo_root

    entries = list(_collector(git, cwd).collect())
    assert [(entry.relative_path(cwd), entry.partially_staged) for entry in entries] == [
        ("a.py", False),
        ("sub/b.py", True),
    ]


def test_collect_is_lazy_until_iterated(repo_root: Path, write_files) -> None:
    write_files("a.py")
    git = FakeGitClient(repo_root, staged=["a.py"])

    iterator = _collector(git, repo_root).collect()
    assert git.calls == []

    entry = next(iterator)
    assert entry.file == repo_root / "a.py"
    assert git.calls == ["resolve_root", "list_changed_files", "list_staged_files"]
    with pytest.raises(StopIteration):
        next(iterator)


def test_collect_propagates_git_errors(repo_root: Path) -> None:
    git = FakeGitClient(repo_root, error="not a git repository")

    with pytest.raises(RuntimeError, match="not a git repository"):
        list(_collector(git, repo_root).collect())


def test_collect_yields_nothing_without_staged_files(repo_root: Path, write_files) -> None:
    write_files("a.py")
    git = FakeGitClient(repo_root, changed=["a.py"])

    assert list(_collector(git, repo_root).collect()) == []
