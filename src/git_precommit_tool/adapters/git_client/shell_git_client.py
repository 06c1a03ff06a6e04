from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Sequence

from git_precommit_tool.domain.ports import GitClientPort


class ShellGitClientAdapter(GitClientPort):
    def __init__(self, *, git_executable: str = "git", timeout_seconds: float = 60.0) -> None:
        self._git_executable = git_executable
        self._timeout_seconds = timeout_seconds
        self._logger = logging.getLogger(__name__)

    def resolve_root(self, cwd: Path) -> Path:
        result = self._run_git(["rev-parse", "--show-toplevel"], cwd=cwd)
        root = (result.stdout or "").strip()
        if not root:
            raise RuntimeError(f"Cannot resolve git repository root from: {cwd}")
        return Path(root).resolve()

    def list_changed_files(self, cwd: Path) -> list[str]:
        return self._list_paths(["diff", "--name-only", "-z"], cwd=cwd)

    def list_staged_files(self, cwd: Path) -> list[str]:
        return self._list_paths(["diff", "--name-only", "--cached", "-z"], cwd=cwd)

    def add(self, path: Path, cwd: Path) -> None:
        self._logger.info(
            "staging file",
            extra={"event": "git.add.start", "path": str(path)},
        )
        self._run_git(["add", "--", str(path)], cwd=cwd)

    def _list_paths(self, args: Sequence[str], cwd: Path) -> list[str]:
        result = self._run_git(args, cwd=cwd)
        paths = [item for item in (result.stdout or "").split("\0") if item]
        self._logger.debug(
            "git paths listed",
            extra={"event": "git.diff.listed", "command": " ".join(args), "count": len(paths)},
        )
        return paths

    def _run_git(self, args: Sequence[str], cwd: Path) -> subprocess.CompletedProcess[str]:
        command = [self._git_executable, *args]
        try:
            return subprocess.run(
                command,
                cwd=str(cwd),
                check=True,
                text=True,
                # undecodable path bytes must round-trip to the filesystem
                errors="surrogateescape",
                capture_output=True,
                timeout=self._timeout_seconds,
            )
        except FileNotFoundError as error:
            raise RuntimeError(
                f"Git executable '{self._git_executable}' was not found in PATH"
            ) from error
        except subprocess.TimeoutExpired as error:
            raise RuntimeError(
                f"Git command timed out after {self._timeout_seconds}s: {' '.join(command)}"
            ) from error
        except subprocess.CalledProcessError as error:
            stderr = (error.stderr or "").strip()
            stdout = (error.stdout or "").strip()
            details = stderr or stdout or "No command output"
            self._logger.error(
                "git command failed",
                extra={
                    "event": "git.command.error",
                    "command": " ".join(command),
                    "cwd": str(cwd),
                    "return_code": error.returncode,
                    "details": details,
                },
            )
            raise RuntimeError(
                f"Git command failed ({error.returncode}): {' '.join(command)}\n{details}"
            ) from error
