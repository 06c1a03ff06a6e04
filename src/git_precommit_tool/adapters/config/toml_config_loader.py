from __future__ import annotations
"""Project configuration loaded from TOML.

By default the configuration lives in the `[tool.precommit-gate]` table of the
scanned project's `pyproject.toml`:

    [tool.precommit-gate]
    exclude = ["migrations/.*", ".*_pb2\\.py"]
    analyze = { ignore-unstaged-files = true }
    format = false

The section itself may also be `true` (enabled with defaults) or `false`
(tool disabled). A custom config file holds the same keys at root level.
"""

import logging
from pathlib import Path
import re
import tomllib
from typing import Any

from git_precommit_tool.domain.ports import ConfigPort


SECTION_NAME = "precommit-gate"
PYPROJECT_FILE = "pyproject.toml"
_RESERVED_KEYS = {"enabled", "exclude"}


class TomlConfigLoader(ConfigPort):
    def __init__(self, *, project_dir: Path | None = None) -> None:
        self._project_dir = project_dir
        self._config: dict[str, Any] = {}
        self._logger = logging.getLogger(__name__)

    @property
    def global_config(self) -> dict[str, Any]:
        """Configuration table resolved by the last `load_global_config` call."""
        return dict(self._config)

    def load_global_config(self, config_file: Path | None = None) -> bool:
        if config_file is None:
            path = (self._project_dir or Path.cwd()) / PYPROJECT_FILE
            document = _load_toml_file(path, required=False)
            tool_section = document.get("tool", {})
            if not isinstance(tool_section, dict):
                raise ValueError(f"Invalid 'tool' table in {path}")
            raw_config = tool_section.get(SECTION_NAME)
            source = f"tool.{SECTION_NAME} in {path}"
        else:
            path = config_file
            raw_config = _load_toml_file(path, required=True)
            source = str(path)

        enabled, config = _parse_global_config(raw_config, source)
        self._config = config
        self._logger.debug(
            "configuration loaded",
            extra={"event": "config.loaded", "source": source, "enabled": enabled, "keys": sorted(config)},
        )
        return enabled

    def load_task_config(self, task_name: str, *, enabled_by_default: bool = True) -> dict[str, Any] | None:
        if task_name in _RESERVED_KEYS:
            raise ValueError(f"'{task_name}' is a reserved configuration key, not a task name")

        value = self._config.get(task_name)
        if value is None:
            return {} if enabled_by_default else None
        if value is True:
            return {}
        if value is False:
            return None
        if isinstance(value, dict):
            return dict(value)
        raise ValueError(
            f"Invalid configuration for task '{task_name}': expected true, false or a table, got {value!r}"
        )

    def load_exclude_patterns(self) -> list[re.Pattern[str]]:
        value = self._config.get("exclude")
        if value is None:
            return []
        if isinstance(value, str):
            raw_patterns = [value]
        elif isinstance(value, list) and all(isinstance(item, str) for item in value):
            raw_patterns = value
        else:
            raise ValueError(f"Invalid 'exclude' configuration: expected a string or a list of strings, got {value!r}")

        patterns: list[re.Pattern[str]] = []
        for raw_pattern in raw_patterns:
            try:
                patterns.append(re.compile(raw_pattern))
            except re.error as error:
                raise ValueError(f"Invalid exclude pattern '{raw_pattern}': {error}") from error
        return patterns


def _parse_global_config(raw_config: object, source: str) -> tuple[bool, dict[str, Any]]:
    if raw_config is None or raw_config is True:
        return True, {}
    if raw_config is False:
        return False, {}
    if not isinstance(raw_config, dict):
        raise ValueError(f"Invalid configuration in {source}: expected true, false or a table, got {raw_config!r}")

    config = dict(raw_config)
    enabled = config.pop("enabled", True)
    if not isinstance(enabled, bool):
        raise ValueError(f"Invalid configuration in {source}: 'enabled' must be a boolean")
    if not enabled:
        return False, {}
    return True, config


def _load_toml_file(path: Path, *, required: bool) -> dict[str, Any]:
    if not path.exists():
        if required:
            raise ValueError(f"Config file not found: {path}")
        return {}

    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as error:
        raise ValueError(f"Invalid TOML in {path}: {error}") from error
    except OSError as error:
        raise ValueError(f"Unable to read config file {path}: {error}") from error
