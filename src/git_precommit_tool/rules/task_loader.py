from __future__ import annotations
"""Build the ordered task registry from the project configuration."""

import logging
from pathlib import Path

from git_precommit_tool.domain.ports import ConfigPort, TaskLoaderPort
from git_precommit_tool.domain.tasks import TaskBase
from git_precommit_tool.rules.analysis_task import AnalysisConfig, AnalysisRepoTask
from git_precommit_tool.rules.command_runtime import CommandRunner
from git_precommit_tool.rules.format_task import FormatConfig, FormatFileTask
from git_precommit_tool.rules.outdated_task import OutdatedConfig, OutdatedRepoTask


LOGGER = logging.getLogger(__name__)


class ConfiguredTaskLoader(TaskLoaderPort):
    """Instantiate every enabled task in registration order.

    Formatting runs before analysis so the analyzer sees fixed files. The
    dependency check is opt-in.
    """

    def __init__(self, config_loader: ConfigPort, runner: CommandRunner, *, project_dir: Path) -> None:
        self._config_loader = config_loader
        self._runner = runner
        self._project_dir = project_dir

    def load_tasks(self) -> list[TaskBase]:
        tasks: list[TaskBase] = []

        format_options = self._config_loader.load_task_config("format")
        if format_options is not None:
            tasks.append(FormatFileTask(self._runner, FormatConfig.from_mapping(format_options)))

        analyze_options = self._config_loader.load_task_config("analyze")
        if analyze_options is not None:
            tasks.append(
                AnalysisRepoTask(
                    self._runner,
                    AnalysisConfig.from_mapping(analyze_options),
                    project_dir=self._project_dir,
                )
            )

        outdated_options = self._config_loader.load_task_config("outdated", enabled_by_default=False)
        if outdated_options is not None:
            tasks.append(
                OutdatedRepoTask(
                    self._runner,
                    OutdatedConfig.from_mapping(outdated_options),
                    project_dir=self._project_dir,
                )
            )

        LOGGER.info(
            "tasks loaded",
            extra={"event": "tasks.loaded", "tasks": [task.task_name for task in tasks]},
        )
        return tasks
