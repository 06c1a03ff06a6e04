from __future__ import annotations
"""Process runtime primitives owned by the rules layer.

These contracts are intentionally outside the core domain because spawning
formatters and linters is task-specific; the orchestrator never runs them.
"""

import subprocess
from pathlib import Path
from typing import Callable, Protocol, Sequence


class CommandRunner(Protocol):
    """Rule-scoped contract for executing an external tool."""

    def run(self, command: Sequence[str], cwd: Path) -> tuple[int, str, str]:
        """Execute command and return `(exit_code, stdout, stderr)`."""
        ...


class ShellCommandRunner:
    """Run a formatter/linter command through a shell process."""

    def __init__(
        self,
        *,
        timeout_seconds: float = 600.0,
        runner: Callable[..., subprocess.CompletedProcess[str]] = subprocess.run,
    ) -> None:
        self._timeout_seconds = timeout_seconds
        self._runner = runner

    def run(self, command: Sequence[str], cwd: Path) -> tuple[int, str, str]:
        if not command:
            raise ValueError("Cannot run an empty command")

        try:
            completed = self._runner(
                list(command),
                cwd=str(cwd),
                check=False,
                text=True,
                errors="surrogateescape",
                capture_output=True,
                timeout=self._timeout_seconds,
            )
        except FileNotFoundError as error:
            raise RuntimeError(f"Executable '{command[0]}' was not found in PATH") from error
        except subprocess.TimeoutExpired as error:
            raise RuntimeError(
                f"Command timed out after {self._timeout_seconds}s in {cwd}: {' '.join(command)}"
            ) from error

        return completed.returncode, completed.stdout or "", completed.stderr or ""
