from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping


SUPPORTED_LOG_FORMATS = {"text", "json"}
SUPPORTED_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(slots=True)
class AppConfig:
    directory: Path
    config_file: Path | None
    continue_on_rejected: bool
    detailed_exit_code: bool
    log_level: str
    log_format: str


def load_config(args, env: Mapping[str, str]) -> AppConfig:
    directory_raw = _normalize_empty(args.directory) or _normalize_empty(env.get("PRECOMMIT_GATE_DIRECTORY")) or "."
    config_file_raw = _normalize_empty(args.config_path) or _normalize_empty(env.get("PRECOMMIT_GATE_CONFIG"))
    log_level = (_normalize_empty(args.log_level) or _normalize_empty(env.get("LOG_LEVEL")) or "INFO").upper()
    log_format = (_normalize_empty(args.log_format) or _normalize_empty(env.get("LOG_FORMAT")) or "text").lower()

    continue_on_rejected = args.continue_on_rejected
    if continue_on_rejected is None:
        continue_on_rejected = _parse_bool(
            env.get("PRECOMMIT_GATE_CONTINUE_ON_REJECTED", "false"),
            "PRECOMMIT_GATE_CONTINUE_ON_REJECTED",
        )

    detailed_exit_code = args.detailed_exit_code
    if detailed_exit_code is None:
        detailed_exit_code = _parse_bool(
            env.get("PRECOMMIT_GATE_DETAILED_EXIT_CODE", "false"),
            "PRECOMMIT_GATE_DETAILED_EXIT_CODE",
        )

    if log_level not in SUPPORTED_LOG_LEVELS:
        valid = ", ".join(sorted(SUPPORTED_LOG_LEVELS))
        raise ValueError(f"Unsupported log level '{log_level}'. Allowed values: {valid}")

    if log_format not in SUPPORTED_LOG_FORMATS:
        valid = ", ".join(sorted(SUPPORTED_LOG_FORMATS))
        raise ValueError(f"Unsupported log format '{log_format}'. Allowed values: {valid}")

    directory = Path(directory_raw).expanduser()
    if not directory.is_dir():
        raise ValueError(f"Directory does not exist: {directory}")

    config_file: Path | None = None
    if config_file_raw is not None:
        config_file = Path(config_file_raw).expanduser()
        if not config_file.is_absolute():
            config_file = directory / config_file

    return AppConfig(
        directory=directory.resolve(),
        config_file=config_file,
        continue_on_rejected=continue_on_rejected,
        detailed_exit_code=detailed_exit_code,
        log_level=log_level,
        log_format=log_format,
    )


def _parse_bool(value: str, name: str) -> bool:
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off", ""}:
        return False
    raise ValueError(f"{name} must be a boolean (true/false)")


def _normalize_empty(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None
