"""Pluggable quality-gate tasks."""

from .analysis_task import AnalysisConfig, AnalysisRepoTask
from .command_runtime import ShellCommandRunner
from .format_task import FormatConfig, FormatFileTask
from .outdated_task import OutdatedConfig, OutdatedRepoTask
from .task_loader import ConfiguredTaskLoader

__all__ = [
	"AnalysisConfig",
	"AnalysisRepoTask",
	"ConfiguredTaskLoader",
	"FormatConfig",
	"FormatFileTask",
	"OutdatedConfig",
	"OutdatedRepoTask",
	"ShellCommandRunner",
]
