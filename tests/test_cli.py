from __future__ import annotations

from pathlib import Path

import pytest

from git_precommit_tool.cli import main as cli_main
from git_precommit_tool.cli.config import load_config
from git_precommit_tool.domain.results import HookResult

_ENV_KEYS = (
    "PRECOMMIT_GATE_DIRECTORY",
    "PRECOMMIT_GATE_CONFIG",
    "PRECOMMIT_GATE_CONTINUE_ON_REJECTED",
    "PRECOMMIT_GATE_DETAILED_EXIT_CODE",
    "LOG_LEVEL",
    "LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(cli_main, "configure_logging", lambda *args, **kwargs: None)


def _args(*argv: str):
    return cli_main.build_parser().parse_args(list(argv))


def test_load_config_defaults(repo_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(repo_root)

    config = load_config(_args(), env={})

    assert config.directory == repo_root
    assert config.config_file is None
    assert config.continue_on_rejected is False
    assert config.detailed_exit_code is False
    assert config.log_level == "INFO"
    assert config.log_format == "text"


def test_load_config_reads_environment_fallbacks(repo_root: Path) -> None:
    env = {
        "PRECOMMIT_GATE_DIRECTORY": str(repo_root),
        "PRECOMMIT_GATE_CONFIG": "gate.toml",
        "PRECOMMIT_GATE_CONTINUE_ON_REJECTED": "yes",
        "PRECOMMIT_GATE_DETAILED_EXIT_CODE": "1",
        "LOG_LEVEL": "debug",
        "LOG_FORMAT": "JSON",
    }

    config = load_config(_args(), env=env)

    assert config.directory == repo_root
    assert config.config_file == repo_root / "gate.toml"
    assert config.continue_on_rejected is True
    assert config.detailed_exit_code is True
    assert config.log_level == "DEBUG"
    assert config.log_format == "json"


def test_arguments_override_environment(repo_root: Path) -> None:
    env = {"PRECOMMIT_GATE_CONTINUE_ON_REJECTED": "true"}

    config = load_config(_args("-d", str(repo_root), "--no-continue-on-rejected", "-c", "/etc/gate.toml"), env=env)

    assert config.continue_on_rejected is False
    assert config.config_file == Path("/etc/gate.toml")


@pytest.mark.parametrize(
    ("argv", "env", "message"),
    [
        ((), {"PRECOMMIT_GATE_CONTINUE_ON_REJECTED": "maybe"}, "PRECOMMIT_GATE_CONTINUE_ON_REJECTED"),
        (("-l", "verbose"), {}, "log level"),
        ((), {"LOG_FORMAT": "xml"}, "log format"),
        (("-d", "/does/not/exist"), {}, "Directory does not exist"),
    ],
)
def test_load_config_rejects_invalid_values(argv, env, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        load_config(_args(*argv), env=env)


@pytest.mark.parametrize(
    ("result", "simple", "detailed"),
    [
        (HookResult.CLEAN, 0, 0),
        (HookResult.HAS_CHANGES, 0, 1),
        (HookResult.HAS_UNSTAGED_CHANGES, 1, 2),
        (HookResult.REJECTED, 1, 3),
    ],
)
def test_main_maps_hook_result_to_exit_code(
    repo_root: Path, monkeypatch: pytest.MonkeyPatch, result: HookResult, simple: int, detailed: int
) -> None:
    monkeypatch.setattr(cli_main, "_build_hooks", lambda config: lambda: result)

    assert cli_main.main(["-d", str(repo_root)]) == simple
    assert cli_main.main(["-d", str(repo_root), "--detailed-exit-code"]) == detailed


def test_main_passes_run_options_to_hooks(repo_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    hooks = cli_main._build_hooks(
        load_config(_args("-d", str(repo_root), "-e", "-c", "gate.toml"), env={}),
    )

    assert hooks.cwd == repo_root
    assert hooks.config.continue_on_rejected is True
    assert hooks.config.config_file == repo_root / "gate.toml"


def test_main_reports_runtime_errors_with_dedicated_exit_code(
    repo_root: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def _failing_hooks(config):
        def _run() -> HookResult:
            raise RuntimeError("not a git repository")

        return _run

    monkeypatch.setattr(cli_main, "_build_hooks", _failing_hooks)

    assert cli_main.main(["-d", str(repo_root), "--detailed-exit-code"]) == cli_main.EXIT_CODE_ERROR


def test_main_exits_with_error_code_on_invalid_configuration(monkeypatch: pytest.MonkeyPatch) -> None:
    with pytest.raises(SystemExit) as exit_info:
        cli_main.main(["-d", "/does/not/exist"])

    assert exit_info.value.code == cli_main.EXIT_CODE_ERROR
