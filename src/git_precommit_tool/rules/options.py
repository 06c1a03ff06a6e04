from __future__ import annotations
"""Validation helpers for task option tables."""

from typing import Any, Iterable, Mapping


def reject_unknown_options(task_name: str, options: Mapping[str, Any], allowed: Iterable[str]) -> None:
    unknown = set(options) - set(allowed)
    if unknown:
        raise ValueError(f"Unknown option(s) for task '{task_name}': {', '.join(sorted(unknown))}")


def parse_command(value: object, name: str) -> tuple[str, ...]:
    command = parse_string_list(value, name)
    if not command:
        raise ValueError(f"'{name}' must not be empty")
    return command


def parse_string_list(value: object, name: str) -> tuple[str, ...]:
    if isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
        return tuple(value)
    raise ValueError(f"'{name}' must be a list of strings")


def parse_bool(value: object, name: str) -> bool:
    if isinstance(value, bool):
        return value
    raise ValueError(f"'{name}' must be a boolean (true/false)")


def normalize_extensions(extensions: Iterable[str]) -> tuple[str, ...]:
    """Normalize extension input to deduplicated lowercase dot-prefixed tuple."""
    normalized: list[str] = []
    seen: set[str] = set()

    for item in extensions:
        ext = item.strip().lower()
        if not ext:
            continue
        if not ext.startswith("."):
            ext = f".{ext}"
        if ext not in seen:
            seen.add(ext)
            normalized.append(ext)

    return tuple(normalized)
