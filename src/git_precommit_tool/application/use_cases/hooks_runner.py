from __future__ import annotations
"""Application use case running all enabled tasks on the staged files."""

from dataclasses import dataclass, field
from functools import partial
from itertools import chain
import logging
from pathlib import Path
from typing import Callable, Iterable, Sequence

from git_precommit_tool.application.use_cases.staged_file_collector import StagedFileCollector
from git_precommit_tool.domain.entities import HooksConfig, RepoEntry, TaskStatus
from git_precommit_tool.domain.ports import (
    ConfigPort,
    FileSystemPort,
    GitClientPort,
    StatusReporterPort,
    TaskLoaderPort,
)
from git_precommit_tool.domain.results import (
    Abort,
    Continue,
    HookResult,
    StepOutcome,
    TaskResult,
    fold_results,
)
from git_precommit_tool.domain.tasks import FileTask, RepoTask, file_tasks, repo_tasks


LOGGER = logging.getLogger(__name__)

Step = Callable[[], StepOutcome]


@dataclass(slots=True)
class Hooks:
    """Core orchestration use case.

    Responsibilities:
    - honor the global enable switch of the configuration
    - collect staged entries through `StagedFileCollector`
    - run every file task on every entry, then every repository task once
    - re-stage fixed files that were fully staged
    - fold all per-entry and per-task outcomes into one `HookResult`

    The instance is callable; each call is one complete run against the
    current repository state.
    """

    git_client: GitClientPort
    filesystem: FileSystemPort
    config_loader: ConfigPort
    task_loader: TaskLoaderPort
    reporter: StatusReporterPort
    config: HooksConfig = field(default_factory=HooksConfig)
    cwd: Path = field(default_factory=Path.cwd)

    def __post_init__(self) -> None:
        self.cwd = self.cwd.resolve()

    def __call__(self) -> HookResult:
        """Execute all enabled tasks on the staged files of the repository.

        A `CLEAN` result is only possible if every operation was clean. If at
        least one fully staged file had to be fixed, the result is at least
        `HAS_CHANGES`; fixing a partially staged file yields
        `HAS_UNSTAGED_CHANGES`. Any unfixable problem yields `REJECTED`.

        Raises:
            ValueError: The configuration is invalid.
            RuntimeError: Git could not be queried.
        """
        if not self.config_loader.load_global_config(self.config.config_file):
            LOGGER.info(
                "precommit-gate has been disabled via the configuration",
                extra={"event": "hooks.disabled"},
            )
            return HookResult.CLEAN

        tasks = self.task_loader.load_tasks()
        collector = StagedFileCollector(
            git_client=self.git_client,
            filesystem=self.filesystem,
            cwd=self.cwd,
            exclude_patterns=tuple(self.config_loader.load_exclude_patterns()),
        )
        entries = list(collector.collect())
        LOGGER.info(
            "staged files collected",
            extra={
                "event": "hooks.entries.collected",
                "count": len(entries),
                "tasks": [task.task_name for task in tasks],
            },
        )
        # Repository tasks that declare call_for_empty_entries are not run here either.
        if not entries:
            return HookResult.CLEAN

        scan_tasks = file_tasks(tasks)
        steps = chain(
            (partial(self._scan_entry, scan_tasks, entry) for entry in entries),
            (partial(self._evaluate_repo_task, task, entries) for task in repo_tasks(tasks)),
        )
        result = self._fold_steps(steps)

        LOGGER.info(
            "hooks run completed",
            extra={
                "event": "hooks.completed",
                "result": result.name,
                "success": result.is_success,
            },
        )
        return result

    @staticmethod
    def _fold_steps(steps: Iterable[Step], base: HookResult = HookResult.CLEAN) -> HookResult:
        state = base
        for step in steps:
            outcome = step()
            if isinstance(outcome, Abort):
                return outcome.result
            state = state.raise_to(outcome.result)
        return state

    def _scan_entry(self, tasks: Sequence[FileTask], entry: RepoEntry) -> StepOutcome:
        self._notify(message=f"Scanning {self._display(entry)}...", status=TaskStatus.SCANNING)
        try:
            scan_result = TaskResult.ACCEPTED
            for task in tasks:
                if not task.can_process(entry):
                    continue
                task_result = self._run_file_task(task, entry)
                if self._aborts_on(task_result):
                    self._log_file_task_result(HookResult.REJECTED, entry)
                    return Abort()
                scan_result = scan_result.raise_to(task_result)

            hook_result = self._process_task_result(scan_result, entry)
            self._log_file_task_result(hook_result, entry)
            return Continue(hook_result)
        finally:
            self._complete()

    def _run_file_task(self, task: FileTask, entry: RepoEntry) -> TaskResult:
        self._notify(detail=f"[{task.task_name}]")
        task_result = task(entry)
        LOGGER.debug(
            "file task finished",
            extra={
                "event": "hooks.file_task.result",
                "task": task.task_name,
                "path": self._display(entry),
                "task_result": task_result.name,
            },
        )
        return task_result

    def _log_file_task_result(self, hook_result: HookResult, entry: RepoEntry) -> None:
        path = self._display(entry)
        if hook_result is HookResult.CLEAN:
            message = f"Accepted file {path}"
        elif hook_result is HookResult.HAS_CHANGES:
            message = f"Fixed up {path}"
        elif hook_result is HookResult.HAS_UNSTAGED_CHANGES:
            message = f"Fixed up partially staged file {path}"
        else:
            message = f"Rejected file {path}"
        self._notify(message=message, status=hook_result.to_status(), clear=True)

    def _evaluate_repo_task(self, task: RepoTask, entries: Sequence[RepoEntry]) -> StepOutcome:
        filtered_entries = [entry for entry in entries if task.can_process(entry)]
        if filtered_entries or task.call_for_empty_entries:
            return self._run_repo_task(task, filtered_entries)
        return Continue()

    def _run_repo_task(self, task: RepoTask, entries: list[RepoEntry]) -> StepOutcome:
        self._notify(message=f"Running {task.task_name}...", status=TaskStatus.SCANNING)
        try:
            task_result = task(entries)
            LOGGER.debug(
                "repository task finished",
                extra={
                    "event": "hooks.repo_task.result",
                    "task": task.task_name,
                    "entry_count": len(entries),
                    "task_result": task_result.name,
                },
            )
            if self._aborts_on(task_result):
                self._log_repo_task_result(HookResult.REJECTED, task)
                return Abort()

            hook_result = self._process_multi_task_result(task_result, entries)
            self._log_repo_task_result(hook_result, task)
            return Continue(hook_result)
        finally:
            self._complete()

    def _log_repo_task_result(self, hook_result: HookResult, task: RepoTask) -> None:
        if hook_result is HookResult.CLEAN:
            message = f"Completed {task.task_name}"
        elif hook_result is HookResult.HAS_CHANGES:
            message = f"Completed {task.task_name}, fixed up some files"
        elif hook_result is HookResult.HAS_UNSTAGED_CHANGES:
            message = f"Completed {task.task_name}, fixed up some partially staged files"
        else:
            message = f"Completed {task.task_name}, found problems"
        self._notify(message=message, status=hook_result.to_status(), clear=True)

    def _aborts_on(self, task_result: TaskResult) -> bool:
        return task_result is TaskResult.REJECTED and not self.config.continue_on_rejected

    def _process_task_result(self, task_result: TaskResult, entry: RepoEntry | None) -> HookResult:
        if task_result is TaskResult.ACCEPTED:
            return HookResult.CLEAN
        if task_result is TaskResult.MODIFIED:
            if entry is not None and entry.partially_staged:
                return HookResult.HAS_UNSTAGED_CHANGES
            if entry is not None:
                self.git_client.add(entry.file, cwd=self.cwd)
                LOGGER.info(
                    "fixed file re-staged",
                    extra={"event": "hooks.entry.restaged", "path": self._display(entry)},
                )
            return HookResult.HAS_CHANGES
        return HookResult.REJECTED

    def _process_multi_task_result(self, task_result: TaskResult, entries: Sequence[RepoEntry]) -> HookResult:
        if not entries:
            return self._process_task_result(task_result, None)
        return fold_results(
            (self._process_task_result(task_result, entry) for entry in entries),
            HookResult.CLEAN,
        )

    def _display(self, entry: RepoEntry) -> str:
        return entry.relative_path(self.cwd)

    def _notify(self, **status: object) -> None:
        try:
            self.reporter.update_status(**status)
        except Exception:  # noqa: BLE001
            LOGGER.warning(
                "status notification failed",
                exc_info=True,
                extra={"event": "hooks.status.failed"},
            )

    def _complete(self) -> None:
        try:
            self.reporter.complete_status()
        except Exception:  # noqa: BLE001
            LOGGER.warning(
                "status completion failed",
                exc_info=True,
                extra={"event": "hooks.status.failed"},
            )
