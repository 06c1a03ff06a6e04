from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Sequence

from git_precommit_tool.adapters.config.toml_config_loader import TomlConfigLoader
from git_precommit_tool.adapters.filesystem.local_filesystem import LocalFileSystemAdapter
from git_precommit_tool.adapters.git_client.shell_git_client import ShellGitClientAdapter
from git_precommit_tool.adapters.status.logging_status_reporter import LoggingStatusReporter
from git_precommit_tool.application.use_cases.hooks_runner import Hooks
from git_precommit_tool.cli.config import AppConfig, load_config
from git_precommit_tool.domain.entities import HooksConfig
from git_precommit_tool.domain.results import HookResult
from git_precommit_tool.logging_utils import configure_logging
from git_precommit_tool.rules import ConfiguredTaskLoader, ShellCommandRunner


EXIT_CODE_ERROR = 4


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="precommit-gate",
        description="Run formatters and linters on the staged files of a git repository before committing.",
    )

    parser.add_argument(
        "-d",
        "--directory",
        required=False,
        help="Project directory to scan. Defaults to the current directory. Falls back to PRECOMMIT_GATE_DIRECTORY.",
    )
    parser.add_argument(
        "-c",
        "--config-path",
        required=False,
        help=(
            "TOML file holding the configuration at root level instead of "
            "[tool.precommit-gate] in pyproject.toml. Falls back to PRECOMMIT_GATE_CONFIG."
        ),
    )
    parser.add_argument(
        "-e",
        "--continue-on-rejected",
        action=argparse.BooleanOptionalAction,
        default=None,
        help=(
            "Keep running remaining tasks after a rejection. The result is still rejected. "
            "Falls back to PRECOMMIT_GATE_CONTINUE_ON_REJECTED."
        ),
    )
    parser.add_argument(
        "--detailed-exit-code",
        action=argparse.BooleanOptionalAction,
        default=None,
        help=(
            "Exit with the hook result code (0 clean, 1 has changes, 2 has unstaged changes, 3 rejected) "
            "instead of 0/1. Falls back to PRECOMMIT_GATE_DETAILED_EXIT_CODE."
        ),
    )
    parser.add_argument(
        "-l",
        "--log-level",
        required=False,
        help="Logging level. Falls back to LOG_LEVEL.",
    )
    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        required=False,
        help="Log output format. Falls back to LOG_FORMAT.",
    )

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = load_config(args=args, env=os.environ)
    except ValueError as error:
        parser.print_usage(sys.stderr)
        parser.exit(EXIT_CODE_ERROR, f"{parser.prog}: error: {error}\n")

    configure_logging(config.log_level, log_format=config.log_format)
    logger = logging.getLogger(__name__)
    logger.debug(
        "cli configuration resolved",
        extra={
            "event": "cli.config.resolved",
            "directory": str(config.directory),
            "config_file": str(config.config_file) if config.config_file else None,
            "continue_on_rejected": config.continue_on_rejected,
            "detailed_exit_code": config.detailed_exit_code,
        },
    )

    try:
        result = _build_hooks(config)()
    except (ValueError, RuntimeError) as error:
        logger.exception("hooks execution failed", extra={"event": "cli.execution.failed", "error": str(error)})
        return EXIT_CODE_ERROR

    return _exit_code(result, detailed=config.detailed_exit_code)


def _build_hooks(config: AppConfig) -> Hooks:
    config_loader = TomlConfigLoader(project_dir=config.directory)
    return Hooks(
        git_client=ShellGitClientAdapter(),
        filesystem=LocalFileSystemAdapter(),
        config_loader=config_loader,
        task_loader=ConfiguredTaskLoader(
            config_loader,
            ShellCommandRunner(),
            project_dir=config.directory,
        ),
        reporter=LoggingStatusReporter(),
        config=HooksConfig(
            continue_on_rejected=config.continue_on_rejected,
            config_file=config.config_file,
        ),
        cwd=config.directory,
    )


def _exit_code(result: HookResult, *, detailed: bool) -> int:
    if detailed:
        return result.exit_code
    return 0 if result.is_success else 1
