"""Checker configuration discovery from TOML files."""

from __future__ import annotations

import tomllib
from pathlib import Path

from jarcheck.domain.model.configuration import CheckerConfig

# Keys accepted in [tool.jarcheck]
_KNOWN_KEYS = frozenset(
    {"runtime_prefixes", "extra_runtime_prefixes", "max_workers", "fail_fast", "index_archives"}
)


def load_config(config_path: Path) -> CheckerConfig:
    """Read a [tool.jarcheck] table into CheckerConfig.

    Missing table = defaults. `runtime_prefixes` replaces the built-in
    prefixes, `extra_runtime_prefixes` extends them.

    Args:
        config_path: TOML file, typically pyproject.toml or jarcheck.toml

    Returns:
        Validated CheckerConfig

    Raises:
        FileNotFoundError: If path does not exist
        ValueError: If the file is not valid TOML or the table is invalid

    Example:
        [tool.jarcheck]
        extra_runtime_prefixes = ["com.sun.", "org.w3c.dom."]
        max_workers = 8
    """
    if not config_path.exists():
        raise FileNotFoundError(f"config file not found: {config_path}")
    if not config_path.is_file():
        raise ValueError(f"config path must be a file: {config_path}")

    with config_path.open("rb") as f:
        try:
            document = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"invalid TOML in {config_path}: {e}") from e

    table = document.get("tool", {}).get("jarcheck", {})
    if not isinstance(table, dict):
        raise ValueError(f"[tool.jarcheck] must be a table in {config_path}")

    return config_from_mapping(table)


def config_from_mapping(table: dict[str, object]) -> CheckerConfig:
    """Build CheckerConfig from an already parsed table.

    Raises:
        ValueError: On unknown keys or values of the wrong type
    """
    unknown = table.keys() - _KNOWN_KEYS
    if unknown:
        raise ValueError(f"unknown [tool.jarcheck] keys: {sorted(unknown)}")

    config = CheckerConfig()

    if "runtime_prefixes" in table:
        config = CheckerConfig(runtime_prefixes=_str_tuple(table, "runtime_prefixes"))
    if "extra_runtime_prefixes" in table:
        config = config.with_runtime_prefixes(*_str_tuple(table, "extra_runtime_prefixes"))

    return CheckerConfig(
        runtime_prefixes=config.runtime_prefixes,
        max_workers=_optional_int(table, "max_workers"),
        fail_fast=_bool(table, "fail_fast", default=False),
        index_archives=_bool(table, "index_archives", default=True),
    )


def _str_tuple(table: dict[str, object], key: str) -> tuple[str, ...]:
    value = table[key]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"{key} must be a list of strings, got {value!r}")
    return tuple(value)


def _optional_int(table: dict[str, object], key: str) -> int | None:
    value = table.get(key)
    # bool is an int subclass: reject explicitly
    if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
        raise ValueError(f"{key} must be an integer, got {value!r}")
    return value


def _bool(table: dict[str, object], key: str, *, default: bool) -> bool:
    value = table.get(key, default)
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be a boolean, got {value!r}")
    return value
